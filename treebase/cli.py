"""Command-line front end: reads a query count, then that many query lines."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence, TextIO

from treebase.database import COMMANDS, UNKNOWN_COMMAND, Database, QueryError
from treebase.query import tokenize


def _read_count(stream: TextIO) -> int:
    first = stream.readline()
    text = first.strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"expected the number of queries, got {text!r}") from None


def run(stream: TextIO, out: TextIO) -> None:
    """Execute queries read from ``stream`` and write their output to ``out``.

    The first line holds the number of queries to run. A line whose command
    is unknown is reported and does not count towards that number. Input
    ending early stops the run.
    """
    remaining = _read_count(stream)
    database = Database()
    while remaining > 0:
        raw = stream.readline()
        if not raw:
            break
        line = raw.rstrip("\r\n")
        if tokenize(line).tokens[0] not in COMMANDS:
            out.write(UNKNOWN_COMMAND)
            continue
        remaining -= 1
        try:
            rows = database.execute(line)
        except QueryError as error:
            out.write(f"{error}\n")
            continue
        for row in rows:
            out.write(f"{row}\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run queries from standard input and print their results."""
    parser = argparse.ArgumentParser(
        prog="treebase",
        description="Run database queries read from standard input.",
    )
    parser.parse_args(argv)
    try:
        run(sys.stdin, sys.stdout)
    except ValueError as error:
        print(error, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())