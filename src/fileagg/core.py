"""
Core logic for fileagg: walk, select, annotate and concatenate.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional

import pathspec
from tqdm import tqdm

from . import console
from .errors import FileReadError, InvalidRootError
from .walker import Entry, RunConfig, accepts, walk_entries


class CommentStyle(NamedTuple):
    opening: str
    closing: Optional[str] = None


SLASH = CommentStyle("//")
HASH = CommentStyle("#")
HTML = CommentStyle("<!--", "-->")
CSS = CommentStyle("/*", "*/")

DEFAULT_STYLE = SLASH

# Keys are matched case-sensitively against the extension on disk.
_STYLE_MAP: Dict[str, CommentStyle] = {
    "js": SLASH,
    "ts": SLASH,
    "java": SLASH,
    "rs": SLASH,
    "py": HASH,
    "rb": HASH,
    "sh": HASH,
    "yml": HASH,
    "yaml": HASH,
    "html": HTML,
    "css": CSS,
}


def comment_style(extension: Optional[str]) -> CommentStyle:
    if extension is None:
        return DEFAULT_STYLE
    return _STYLE_MAP.get(extension, DEFAULT_STYLE)


def render_header(entry: Entry, style: CommentStyle) -> str:
    return (
        f"\n{style.opening} File: {entry.name}\n"
        f"{style.opening} Path: {entry.path}\n"
    )


def render_footer(style: CommentStyle) -> str:
    return f"{style.closing}\n" if style.closing else ""


def read_text(path: str) -> str:
    # newline="" keeps CRLF files byte-for-byte
    try:
        with open(path, "r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(f"Error reading file '{path}': {e}")


@dataclass
class Aggregate:
    """Append-only output buffer plus the counts reported at the end of a run."""

    chunks: List[str] = field(default_factory=list)
    files: int = 0
    unreadable: int = 0
    walk_errors: int = 0

    def append(self, text: str) -> None:
        if text:
            self.chunks.append(text)

    @property
    def text(self) -> str:
        return "".join(self.chunks)

    def finish(self) -> str:
        return self.text.strip()


def add_file(acc: Aggregate, entry: Entry, verbose: bool = False) -> None:
    """Append the header, body and footer of one accepted *entry* to *acc*."""
    style = comment_style(entry.extension)
    acc.append(render_header(entry, style))
    acc.files += 1
    try:
        acc.append(read_text(entry.path) + "\n")
    except FileReadError as e:
        acc.unreadable += 1
        console.warn(str(e))
    else:
        if verbose:
            console.info(f"+ {entry.path}")
    acc.append(render_footer(style))


def collect(
    config: RunConfig,
    entries: Optional[Iterable[Entry]] = None,
    verbose: bool = False,
    show_progress: Optional[bool] = None,
) -> Aggregate:
    """
    Run the selection pipeline for *config* and return the filled accumulator.

    *entries* replaces the filesystem walk when given. *show_progress* forces
    the progress counter on or off; ``None`` shows it only on a terminal.
    """
    acc = Aggregate()
    bar = tqdm(
        desc="Processing files...",
        unit=" entries",
        leave=False,
        disable=None if show_progress is None else not show_progress,
    )

    def _on_error(exc: Exception) -> None:
        acc.walk_errors += 1
        console.warn(f"Error accessing entry: {exc}")
        bar.update(1)

    if entries is None:
        entries = walk_entries(config, onerror=_on_error)
    try:
        for entry in entries:
            if accepts(entry, config):
                add_file(acc, entry, verbose=verbose)
            bar.update(1)
        bar.set_description_str("Done!")
    finally:
        bar.close()
    return acc


def aggregate_files(
    directory: str,
    include_hidden: bool = False,
    use_ignore_files: bool = True,
    extensions: Iterable[str] = (),
    extra_ignore: Optional[pathspec.GitIgnoreSpec] = None,
    verbose: bool = False,
    show_progress: Optional[bool] = None,
) -> str:
    """
    Concatenate every selected file under *directory* into one string.

    Each file is introduced by a two-line comment header naming the file and
    its path. HTML and CSS blocks are closed with ``-->`` and ``*/``. Files
    that cannot be read as UTF-8 keep their header with an empty body. The
    result is stripped of surrounding whitespace.

    Raises :class:`InvalidRootError` before touching anything if *directory*
    is not an existing directory.
    """
    directory = os.fspath(directory)
    if not os.path.isdir(directory):
        raise InvalidRootError(f"Path is not a directory: '{directory}'")

    config = RunConfig(
        root=directory,
        include_hidden=include_hidden,
        use_ignore_files=use_ignore_files,
        extensions=tuple(extensions),
        extra_ignore=extra_ignore,
    )
    if verbose:
        console.info(f"Scanning {directory} …")

    acc = collect(config, verbose=verbose, show_progress=show_progress)

    if not acc.chunks:
        console.info("No files were processed. Result is empty.")
    else:
        console.info(f"Processed {len(acc.text)} characters")
    if verbose:
        console.info(
            f"{acc.files} files added, {acc.unreadable} unreadable, "
            f"{acc.walk_errors} entries skipped on access errors."
        )
    return acc.finish()
