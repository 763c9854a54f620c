"""RouteEntry and RouteMatch frozen dataclasses."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from roost.routing.matcher import CompiledTemplate, compile_template


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """A declared application route.

    ``public`` decides access: any falsy value makes the route private.
    ``data`` holds the routing subsystem's own properties (view, controller,
    ...), which roost never reads.
    """

    path: str
    public: bool = False
    case_insensitive: bool = False
    data: Mapping[str, Any] = field(default_factory=dict)
    compiled: CompiledTemplate = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "public", bool(self.public))
        object.__setattr__(
            self, "compiled", compile_template(self.path, self.case_insensitive)
        )

    def match(self, candidate: str) -> dict[str, str] | None:
        return self.compiled.match(candidate)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    entry: RouteEntry
    params: dict[str, str]

    @property
    def public(self) -> bool:
        return self.entry.public
