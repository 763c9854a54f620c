"""``roost check``: classify a path the way the navigation guard does."""

import argparse

from roost.cli._resolve import load_or_exit
from roost.guard import normalize_path


def run_check(args: argparse.Namespace) -> None:
    """Print the deciding route for a path, plus any shadowed matches.

    Exits with status 2 when a guest would be challenged to sign in.
    """
    table = load_or_exit(args.table)
    path = normalize_path(args.path, args.base_path)

    found = table.matches(path)
    if not found:
        print(f"{path}: no route declared (unrestricted)")
        return

    first, *shadowed = found
    access = "public" if first.public else "private"
    print(f"{path}: {access} via {first.entry.path}")
    for name, value in first.params.items():
        print(f"  {name} = {value}")
    for other in shadowed:
        print(f"  shadowed: {other.entry.path}")

    if not first.public:
        raise SystemExit(2)
