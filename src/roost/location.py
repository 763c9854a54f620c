"""Location: the navigation surface the default hooks drive.

The host application's router owns the real location (browser history,
a desktop view stack, a test harness). Roost only needs to read and
write the current path and query, so any object with ``path`` and
``search`` properties satisfies ``Location``.

``MemoryLocation`` keeps both in memory and records every change, which
is what the default session uses when no location is supplied.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Location(Protocol):
    """Readable/writable path and query of the current view."""

    @property
    def path(self) -> str: ...

    @path.setter
    def path(self, value: str) -> None: ...

    @property
    def search(self) -> dict[str, str]: ...

    @search.setter
    def search(self, value: dict[str, str]) -> None: ...


class MemoryLocation:
    """In-memory ``Location`` with a change history.

    Usage::

        location = MemoryLocation("/")
        location.path = "/signIn"
        location.search = {"redirect": "users"}
        location.url      # "/signIn?redirect=users"
        location.history  # ["/", "/signIn"]
    """

    __slots__ = ("_path", "_search", "history")

    def __init__(self, path: str = "/", search: dict[str, str] | None = None) -> None:
        self._path = path
        self._search: dict[str, str] = dict(search or {})
        self.history: list[str] = [path]

    @property
    def path(self) -> str:
        return self._path

    @path.setter
    def path(self, value: str) -> None:
        if not value.startswith("/"):
            value = "/" + value
        self._path = value
        self.history.append(value)

    @property
    def search(self) -> dict[str, str]:
        return dict(self._search)

    @search.setter
    def search(self, value: dict[str, str]) -> None:
        self._search = dict(value)

    @property
    def url(self) -> str:
        if not self._search:
            return self._path
        query = "&".join(f"{key}={value}" for key, value in self._search.items())
        return f"{self._path}?{query}"
