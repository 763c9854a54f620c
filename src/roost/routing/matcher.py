"""Path template compilation and matching.

Templates use two markers:

- ``:name``: one or more characters up to the next ``/``
- ``*name``: any characters, ``/`` included (catch-all)

Everything else in a template is literal: ``.``, ``(``, ``+`` and the rest
of the regex metacharacters are escaped before compiling. Matches are
anchored on both ends.

Compiled templates are frozen and memoized, so matching carries no
mutable shared state.
"""

import re
from dataclasses import dataclass
from functools import lru_cache

from roost.errors import ConfigurationError

# marker -> capture pattern
PARAM_PATTERNS: dict[str, str] = {
    ":": r"([^/]+)",
    "*": r"(.*)",
}

_MARKER_RE = re.compile(r"([:*])(\w+)")


@dataclass(frozen=True, slots=True)
class CompiledTemplate:
    """A path template compiled to an anchored regex."""

    template: str
    regex: re.Pattern[str]
    params: tuple[str, ...]

    def match(self, candidate: str) -> dict[str, str] | None:
        """Return the bound parameters, or ``None`` if *candidate* doesn't match."""
        m = self.regex.fullmatch(candidate)
        if m is None:
            return None
        return dict(zip(self.params, m.groups(), strict=True))


@lru_cache(maxsize=1024)
def compile_template(template: str, case_insensitive: bool = False) -> CompiledTemplate:
    """Compile a path template.

    Examples::

        "/users/:id"    -> ^/users/([^/]+)$   params=("id",)
        "/files/*rest"  -> ^/files/(.*)$      params=("rest",)
        "/a.b"          -> ^/a\\.b$           params=()

    Raises ``ConfigurationError`` if a parameter name is declared twice.
    """
    parts: list[str] = []
    params: list[str] = []
    last = 0

    for marker in _MARKER_RE.finditer(template):
        kind, name = marker.groups()
        if name in params:
            msg = f"Parameter {name!r} is declared more than once in {template!r}."
            raise ConfigurationError(msg)
        parts.append(re.escape(template[last : marker.start()]))
        parts.append(PARAM_PATTERNS[kind])
        params.append(name)
        last = marker.end()

    # Trailing literal part
    parts.append(re.escape(template[last:]))

    flags = re.DOTALL
    if case_insensitive:
        flags |= re.IGNORECASE
    return CompiledTemplate(
        template=template,
        regex=re.compile("".join(parts), flags),
        params=tuple(params),
    )


def match(
    candidate: str,
    template: str,
    *,
    case_insensitive: bool = False,
) -> dict[str, str] | None:
    """Test *candidate* against *template*.

    Returns a mapping of parameter name to matched text in declaration
    order, or ``None`` if the template does not match the whole path::

        >>> match("/users/42", "/users/:id")
        {'id': '42'}
        >>> match("/users/42/edit", "/users/:id") is None
        True
    """
    return compile_template(template, case_insensitive).match(candidate)
