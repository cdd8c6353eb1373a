"""
CLI entrypoint for fileagg package.
"""
import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from colorama import just_fix_windows_console

from . import __version__, console
from .core import aggregate_files
from .errors import FileaggError
from .sinks import OutputTarget, deliver
from .walker import load_extra_patterns, parse_file_types


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="fileagg",
        description="Combines contents of files in a directory into a single file.",
    )
    p.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="The directory to search for files (default: current directory)",
    )
    p.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file path (default: fileagg_output.txt)",
    )
    p.add_argument("-s", "--stdout", action="store_true", help="Print output to stdout")
    p.add_argument(
        "-c", "--clipboard", action="store_true", help="Copy output to clipboard"
    )
    p.add_argument(
        "-i", "--include-hidden", action="store_true", help="Include hidden files"
    )
    p.add_argument(
        "-n", "--no-ignore", action="store_true", help="Ignore .gitignore rules"
    )
    p.add_argument(
        "-f",
        "--file-types",
        help="Comma-separated list of file types to include (e.g., 'rs,js,py')",
    )
    p.add_argument(
        "--config",
        type=Path,
        help="Path to a file with extra ignore patterns (one per line)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    just_fix_windows_console()
    try:
        ns = _parse_args(argv)
        target = OutputTarget.resolve(ns.output, stdout=ns.stdout, clipboard=ns.clipboard)

        extra_spec = None
        if ns.config:
            extra_spec = load_extra_patterns(ns.config.resolve())
            if ns.verbose:
                console.info(f"Loaded extra patterns from {ns.config}")

        output = aggregate_files(
            ns.directory,
            include_hidden=ns.include_hidden,
            use_ignore_files=not ns.no_ignore,
            extensions=parse_file_types(ns.file_types),
            extra_ignore=extra_spec,
            verbose=ns.verbose,
        )
        deliver(output, target)
        message = target.describe()
        if message:
            console.success(message)

    except FileaggError as e:
        console.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        console.error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
