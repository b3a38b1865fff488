#!/usr/bin/env -S uv run --script

# /// script
# requires-python = ">=3.12"
# dependencies = [
#     "click",
# ]
# ///

import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable

import click

__version__ = "0.1"


class RenameError(Exception):
    """Base class for errors that abort a rename run."""


class DirectoryAccessError(RenameError):
    def __init__(self, directory: Path, reason: str):
        self.directory = directory
        super().__init__(f"Could not read directory `{directory}`: {reason}")


class RenameFailedError(RenameError):
    def __init__(self, source: Path, destination: Path, reason: str):
        self.source = source
        self.destination = destination
        super().__init__(f"Could not rename `{source}` to `{destination}`: {reason}")


class SkipReason(Enum):
    EXTENSION = "extension not selected"
    UNSPLITTABLE = "name does not split into two parts"


@dataclass(frozen=True)
class Matched:
    head: str
    tail: str


@dataclass(frozen=True)
class NotApplicable:
    reason: str


@dataclass(frozen=True)
class Renamed:
    old: Path
    new: Path


@dataclass(frozen=True)
class Skipped:
    path: Path
    reason: SkipReason


RenameOutcome = Renamed | Skipped


def split_swap(stem: str, split_separator: str) -> Matched | NotApplicable:
    """Split a base name at the last occurrence of the separator.

    Both pieces are stripped of surrounding whitespace. Anything other than
    two non-empty pieces is not applicable.
    """
    head, found, tail = stem.rpartition(split_separator)
    if not found:
        return NotApplicable(f"no `{split_separator}` in `{stem}`")

    head, tail = head.strip(), tail.strip()
    if not head or not tail:
        return NotApplicable(f"empty part around `{split_separator}` in `{stem}`")

    return Matched(head, tail)


def swapped_name(
    stem: str, extension: str, split_separator: str, join_separator: str, padding: str
) -> str | None:
    """Build the swapped file name, or None when the stem cannot be split."""
    match = split_swap(stem, split_separator)
    if isinstance(match, NotApplicable):
        return None

    separator = f"{padding}{join_separator}{padding}"
    return f"{match.tail}{separator}{match.head}.{extension}"


def _list_entries(directory: Path) -> list[Path]:
    # Listed up front so files renamed during this pass are not seen again
    try:
        return sorted(directory.iterdir())
    except OSError as e:
        raise DirectoryAccessError(directory, e.strerror or str(e)) from e


def rename_tree(
    directory,
    extensions: Iterable[str],
    split_separator: str,
    join_separator: str | None = None,
    padding: str = "",
    recursive: bool = False,
    on_outcome: Callable[[RenameOutcome], None] | None = None,
) -> int:
    """Swap the two halves of every matching file name under ``directory``.

    Returns the number of files renamed, including those in subdirectories
    when ``recursive`` is set. Each rename or skip is reported to
    ``on_outcome`` as it happens.

    Raises DirectoryAccessError if a directory cannot be listed and
    RenameFailedError if a rename fails. Renames already done are kept.
    """
    directory = Path(directory)
    extensions = frozenset(extensions)
    if join_separator is None:
        join_separator = split_separator

    def report(outcome: RenameOutcome) -> None:
        if on_outcome is not None:
            on_outcome(outcome)

    files_renamed = 0
    for path in _list_entries(directory):
        if path.is_dir():
            if recursive:
                files_renamed += rename_tree(
                    path,
                    extensions,
                    split_separator,
                    join_separator,
                    padding,
                    recursive,
                    on_outcome,
                )
            continue

        extension = path.suffix[1:]
        if not extension or extension not in extensions:
            report(Skipped(path, SkipReason.EXTENSION))
            continue

        new_name = swapped_name(
            path.stem, extension, split_separator, join_separator, padding
        )
        if new_name is None:
            report(Skipped(path, SkipReason.UNSPLITTABLE))
            continue

        new_path = path.parent / new_name
        try:
            path.rename(new_path)
        except OSError as e:
            raise RenameFailedError(path, new_path, e.strerror or str(e)) from e

        report(Renamed(path, new_path))
        files_renamed += 1

    return files_renamed


def _split_values(values: Iterable[str]) -> list[str]:
    """Flatten repeated, comma-delimited option values."""
    return [part for value in values for part in value.split(",")]


@dataclass(frozen=True)
class RenameConfig:
    directory: Path
    extensions: frozenset[str]
    split_separator: str
    join_separator: str
    padding: str = ""
    recursive: bool = False

    @classmethod
    def from_options(cls, directory, extensions, separator, padding="", recursive=False):
        """Validate raw option values and build a config.

        ``extensions`` and ``separator`` are sequences of comma-delimited
        strings as collected by click.
        """
        extensions = frozenset(e for e in _split_values(extensions) if e)
        if not extensions:
            raise click.BadParameter(
                "at least one extension is required", param_hint="'--extensions'"
            )

        separators = _split_values(separator)
        if not separators or "" in separators:
            raise click.BadParameter(
                "separators must be non-empty and `,` is not allowed",
                param_hint="'--separator'",
            )
        if len(separators) > 2:
            raise click.BadParameter(
                "at most two separators are allowed", param_hint="'--separator'"
            )

        # A dash may arrive escaped so it is not taken for an option
        split_separator = separators[0].replace("\\", "")
        if not split_separator:
            raise click.BadParameter(
                "split separator is empty after unescaping", param_hint="'--separator'"
            )
        join_separator = separators[1] if len(separators) > 1 else split_separator

        return cls(
            directory=Path(directory),
            extensions=extensions,
            split_separator=split_separator,
            join_separator=join_separator,
            padding=padding,
            recursive=recursive,
        )

    def run(self, on_outcome: Callable[[RenameOutcome], None] | None = None) -> int:
        return rename_tree(
            self.directory,
            self.extensions,
            self.split_separator,
            self.join_separator,
            self.padding,
            self.recursive,
            on_outcome,
        )


def echo_outcome(outcome: RenameOutcome, verbose: bool = False) -> None:
    if isinstance(outcome, Renamed):
        click.echo(f"Renaming `{outcome.old}` to `{outcome.new}`")
    elif outcome.reason is SkipReason.UNSPLITTABLE:
        click.echo(f"Skipping `{outcome.path}`")
    elif verbose:
        click.echo(f"Ignoring `{outcome.path}` ({outcome.reason.value})")


@click.command()
@click.option(
    "--directory",
    "-d",
    default=".",
    type=click.Path(file_okay=False, path_type=Path),
    help="The directory to rename files in (default: current directory)",
)
@click.option(
    "--extensions",
    "-e",
    multiple=True,
    default=["mp3"],
    show_default=True,
    help="Only files ending with these extensions are renamed. Comma-delimited, may be repeated.",
)
@click.option(
    "--separator",
    "-s",
    multiple=True,
    default=["-"],
    show_default=True,
    help=(
        "The separator to use, e.g. `-` or `.`, but not `,`. At most two separators: "
        "the first splits the file name into two parts, the second joins them back."
    ),
)
@click.option("--padding", "-p", default="", help="Padding around the join separator")
@click.option("--recursive", "-r", is_flag=True, help="Rename files in subdirectories too")
@click.option(
    "--verbose", "-v", is_flag=True, help="Also report files with other extensions"
)
@click.version_option(version=__version__)
def swap_rename(directory, extensions, separator, padding, recursive, verbose):
    """
    Rename files by swapping the two parts of their names.

    Each base name is split at the last occurrence of the separator and the
    two parts are joined back in reverse order.

    Examples:
        ./swap_rename.py                    # artist-title.mp3 -> title-artist.mp3
        ./swap_rename.py -p " "             # artist-title.mp3 -> title - artist.mp3
        ./swap_rename.py -s "_,." -e flac,wav -r
    """
    config = RenameConfig.from_options(
        directory, extensions, separator, padding, recursive
    )
    click.echo(
        f"We are renaming files in folder `{config.directory}` "
        f"with extensions {sorted(config.extensions)} ... "
    )

    try:
        renamed = config.run(lambda outcome: echo_outcome(outcome, verbose))
    except RenameError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if renamed == 0:
        click.echo("Oops! No files were renamed.")
    else:
        click.echo(f"Renamed {renamed} files.")


if __name__ == "__main__":
    swap_rename()
