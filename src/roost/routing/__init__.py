"""Routing: path templates and the ordered public/private route table.

Templates are compiled once and memoized; the table is scanned in
declaration order and the first match decides access.
"""

from roost.routing.matcher import CompiledTemplate, compile_template, match
from roost.routing.route import RouteEntry, RouteMatch
from roost.routing.table import RouteTable

__all__ = [
    "CompiledTemplate",
    "RouteEntry",
    "RouteMatch",
    "RouteTable",
    "compile_template",
    "match",
]
