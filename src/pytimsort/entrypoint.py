"""CLI for sorting the lines of text files."""

import logging
import sys
from typing import Any, Callable, Optional, TextIO

import click

from pytimsort.stats import SortStats
from pytimsort.timsort import sort


def configure_logging(level: int = logging.INFO) -> None:
    """Send log records to stderr, and show those from pytimsort at ``level``."""
    # the package logger carries the level, so this still takes effect when
    # something else has already configured the root logger.
    logging.getLogger("pytimsort").setLevel(level)
    if logging.getLogger().handlers:
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _field(line: str, field: Optional[int]) -> str:
    if field is None:
        return line
    parts = line.split()
    # lines without enough fields sort as if the field were empty
    return parts[field - 1] if field <= len(parts) else ""


def _make_key(
    *, numeric: bool, ignore_case: bool, field: Optional[int]
) -> Callable[[str], Any]:
    def key(line: str) -> Any:
        value = _field(line, field)
        if ignore_case:
            value = value.casefold()
        if numeric:
            try:
                return float(value)
            except ValueError:
                raise click.UsageError(
                    f"cannot compare {line!r} numerically: {value!r} is not a number"
                ) from None
        return value

    return key


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-r", "--reverse", is_flag=True, help="sort in descending order")
@click.option(
    "-n", "--numeric", is_flag=True, help="compare lines (or fields) as numbers"
)
@click.option("-f", "--ignore-case", is_flag=True, help="fold case when comparing")
@click.option(
    "-k",
    "--field",
    type=click.IntRange(1, None),
    metavar="N",
    default=None,
    help="compare by the Nth whitespace-separated field (1-based)",
)
@click.option(
    "--stats", "show_stats", is_flag=True, help="print sort statistics to stderr"
)
@click.option(
    "--debug/--no-debug",
    default=None,
    help="check the ordering and internal invariants while sorting "
    "(default: $PYTIMSORT_DEBUG)",
)
@click.option("-v", "--verbose", is_flag=True, help="log each run and merge")
@click.argument("files", nargs=-1, type=click.File("r"))
def main(
    reverse: bool,
    numeric: bool,
    ignore_case: bool,
    field: Optional[int],
    show_stats: bool,
    debug: Optional[bool],
    verbose: bool,
    files: tuple[TextIO, ...],
) -> None:
    """[pytimsort] sorts the lines of FILES (or stdin) to stdout.

    Equal lines keep the order they were read in, so sorting by one field and
    then another gives a multi-level sort.
    """
    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    lines: list[str] = []
    for f in files or (sys.stdin,):
        lines.extend(line.rstrip("\n") for line in f)

    stats = SortStats() if show_stats else None
    key = None
    if numeric or ignore_case or field is not None:
        key = _make_key(numeric=numeric, ignore_case=ignore_case, field=field)
    sort(lines, key=key, reverse=reverse, stats=stats, debug=debug)

    for line in lines:
        click.echo(line)
    if stats is not None:
        click.echo(stats.summary(), err=True)
