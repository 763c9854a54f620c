"""``roost routes``: list declared routes.

Prints every entry in table order with its access level and
parameters. Order matters: the first matching entry decides access.
"""

import argparse

from roost.cli._resolve import load_or_exit


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of ORDER, ACCESS, PATH and PARAMS."""
    table = load_or_exit(args.table)
    if not len(table):
        print("No routes declared.")
        return

    rows: list[tuple[str, str, str, str]] = []
    for index, entry in enumerate(table, start=1):
        access = "public" if entry.public else "private"
        if entry.case_insensitive:
            access += "/i"
        rows.append((str(index), access, entry.path, ", ".join(entry.compiled.params)))

    max_order = max(max(len(r[0]) for r in rows), 1)
    max_access = max(max(len(r[1]) for r in rows), 6)  # "ACCESS" header
    max_path = max(max(len(r[2]) for r in rows), 4)  # "PATH" header

    fmt = f"{{:>{max_order}}}  {{:<{max_access}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("#", "ACCESS", "PATH", "PARAMS"))
    sep_len = max_order + max_access + max_path + 6 + max(len(r[3]) for r in rows)
    print("-" * min(max(sep_len, 20), 80))
    for row in rows:
        print(fmt.format(*row))
