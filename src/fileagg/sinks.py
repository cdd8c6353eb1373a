"""
Output destinations for the aggregated text.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pyperclip

from .errors import ClipboardError, OutputError

DEFAULT_OUTPUT = Path("fileagg_output.txt")


class SinkKind(enum.Enum):
    FILE = "file"
    TERMINAL = "terminal"
    CLIPBOARD = "clipboard"


@dataclass(frozen=True)
class OutputTarget:
    kind: SinkKind
    path: Optional[Path] = None

    @classmethod
    def resolve(
        cls,
        output: Optional[Path] = None,
        stdout: bool = False,
        clipboard: bool = False,
    ) -> "OutputTarget":
        """Terminal beats clipboard, clipboard beats the output file."""
        if stdout:
            return cls(SinkKind.TERMINAL)
        if clipboard:
            return cls(SinkKind.CLIPBOARD)
        return cls(SinkKind.FILE, Path(output) if output else DEFAULT_OUTPUT)

    def describe(self) -> str:
        if self.kind is SinkKind.FILE:
            return f"Output written to {self.path}"
        if self.kind is SinkKind.CLIPBOARD:
            return "Selected file contents have been copied to the clipboard."
        return ""


def write_output(text: str, out_path: Path) -> Path:
    try:
        out_path = out_path.resolve()
    except (OSError, RuntimeError) as e:
        raise OutputError(f"Could not resolve output path '{out_path}': {e}")

    if not out_path.parent.exists():
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(f"Could not create directory '{out_path.parent}': {e}")

    try:
        with out_path.open("w", encoding="utf-8", newline="") as out_fh:
            out_fh.write(text)
    except OSError as e:
        raise OutputError(f"Could not write to output file '{out_path}': {e}")
    return out_path


def print_output(text: str) -> None:
    print(text)


def copy_to_clipboard(text: str) -> None:
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise ClipboardError(f"Failed to copy to clipboard: {e}")


def deliver(text: str, target: OutputTarget) -> None:
    if target.kind is SinkKind.TERMINAL:
        print_output(text)
    elif target.kind is SinkKind.CLIPBOARD:
        copy_to_clipboard(text)
    else:
        write_output(text, target.path or DEFAULT_OUTPUT)
