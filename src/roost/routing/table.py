"""Ordered route table with first-match lookup.

The table belongs to the host application's routing subsystem: it adds
entries as routes are declared. Roost only reads it, once per guarded
navigation, so entries added later are seen by the next navigation.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from roost.routing.route import RouteEntry, RouteMatch

# Keys of a mapping-form route definition that roost interprets itself
_PUBLIC_KEY = "public"
_CASE_KEYS = ("case_insensitive", "caseInsensitiveMatch")


class RouteTable:
    """Ordered collection of ``RouteEntry``.

    Usage::

        table = RouteTable.from_mapping({
            "/": {"public": True, "view": "home"},
            "/users": {"view": "users"},
            "/users/:id": {"view": "user"},
        })
        table.first_match("/users/42")  # RouteMatch(entry=..., params={"id": "42"})

    Lookup is a linear scan in declaration order: the first matching entry
    wins, later entries for the same path are ignored.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[RouteEntry] = ()) -> None:
        self._entries: list[RouteEntry] = list(entries)

    @classmethod
    def from_mapping(cls, routes: Mapping[str, Mapping[str, Any]]) -> RouteTable:
        """Build a table from ``{template: {"public": ..., ...}}``.

        Mapping iteration order is the table order.
        """
        table = cls()
        for template, props in routes.items():
            table.add(template, **dict(props))
        return table

    def add(
        self,
        path: str | RouteEntry,
        /,
        **props: Any,
    ) -> RouteEntry:
        """Append a route. Accepts a ``RouteEntry`` or a template plus properties.

        ``public`` and ``case_insensitive`` (or ``caseInsensitiveMatch``) are
        interpreted; every other property is kept opaque in ``entry.data``.
        Raises ``ConfigurationError`` if the template is malformed.
        """
        if isinstance(path, RouteEntry):
            entry = path
        else:
            public = props.pop(_PUBLIC_KEY, False)
            case_insensitive = False
            for key in _CASE_KEYS:
                if key in props:
                    case_insensitive = bool(props.pop(key))
            entry = RouteEntry(
                path=path,
                public=public,
                case_insensitive=case_insensitive,
                data=props,
            )
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> tuple[RouteEntry, ...]:
        return tuple(self._entries)

    def first_match(self, path: str) -> RouteMatch | None:
        """Return the first entry matching *path*, or ``None``."""
        for entry in self._entries:
            params = entry.match(path)
            if params is not None:
                return RouteMatch(entry=entry, params=params)
        return None

    def matches(self, path: str) -> list[RouteMatch]:
        """Return every entry matching *path*, in table order."""
        result: list[RouteMatch] = []
        for entry in self._entries:
            params = entry.match(path)
            if params is not None:
                result.append(RouteMatch(entry=entry, params=params))
        return result

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
