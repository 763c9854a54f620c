"""Route table import resolution: ``"module:attribute"`` strings to RouteTables.

Shared by ``roost routes`` and ``roost check``.
"""

import importlib
import sys
from collections.abc import Mapping

from roost.errors import ConfigurationError
from roost.routing.table import RouteTable


def resolve_routes(import_string: str) -> RouteTable:
    """Resolve an import string to a ``RouteTable``.

    Accepts ``"module:attribute"``. When the attribute is omitted it
    defaults to ``"routes"``. The attribute may be a ``RouteTable``, a
    ``{template: {...}}`` mapping, or a zero-argument factory returning
    either.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a route table.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "routes"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, RouteTable):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if isinstance(obj, Mapping):
        obj = RouteTable.from_mapping(obj)

    if not isinstance(obj, RouteTable):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a RouteTable"
        raise TypeError(msg)

    return obj


def load_or_exit(import_string: str) -> RouteTable:
    """Resolve *import_string* or print the error and exit with status 1."""
    try:
        return resolve_routes(import_string)
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
