"""
Directory walk and per-entry selection for fileagg.

The walk itself prunes hidden entries and anything matched by ignore files;
:func:`accepts` then decides which of the yielded entries get aggregated.
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

import pathspec

from .errors import ConfigFileError, IgnoreFileError

ErrorHandler = Callable[[Exception], None]

# Per-directory ignore files, patterns relative to the directory holding them.
IGNORE_FILES: Tuple[str, ...] = (".gitignore", ".ignore")

EXCLUDED_SEGMENT = "node_modules"


@dataclass(frozen=True)
class RunConfig:
    root: str
    include_hidden: bool = False
    use_ignore_files: bool = True
    extensions: Tuple[str, ...] = ()
    extra_ignore: Optional[pathspec.GitIgnoreSpec] = None


@dataclass(frozen=True)
class Entry:
    path: str
    is_file: bool

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def extension(self) -> Optional[str]:
        return file_extension(self.name)


def file_extension(name: str) -> Optional[str]:
    """Text after the last dot of *name*; ``None`` for ``.bashrc`` or ``Makefile``."""
    idx = name.rfind(".")
    if idx <= 0:
        return None
    return name[idx + 1:]


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def parse_file_types(value: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated allowlist. Tokens are kept exactly as given."""
    if value is None:
        return ()
    return tuple(value.split(","))


def accepts(entry: Entry, config: RunConfig) -> bool:
    if not entry.is_file:
        return False
    if EXCLUDED_SEGMENT in entry.path:
        return False
    if config.extensions:
        ext = entry.extension
        return ext is not None and ext in config.extensions
    return True


# Ignore-file utilities
def _read_spec(path: Path, error_cls: type) -> pathspec.GitIgnoreSpec:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return pathspec.GitIgnoreSpec.from_lines(fh)
    except (OSError, UnicodeDecodeError) as e:
        raise error_cls(f"Could not read patterns file '{path}': {e}")


def load_ignore_file(path: Path) -> pathspec.GitIgnoreSpec:
    return _read_spec(path, IgnoreFileError)


def load_extra_patterns(config_path: Path) -> pathspec.GitIgnoreSpec:
    """Compile a user-supplied patterns file, one gitignore pattern per line."""
    if not config_path.exists():
        raise ConfigFileError(f"Config file '{config_path}' does not exist")
    if not config_path.is_file():
        raise ConfigFileError(f"'{config_path}' is not a file")
    return _read_spec(config_path, ConfigFileError)


def global_excludes_file() -> Path:
    """
    Locate the user's global git excludes file.

    ``core.excludesFile`` from ``~/.gitconfig`` (or the XDG git config) wins;
    otherwise git's default ``$XDG_CONFIG_HOME/git/ignore`` is used.
    """
    xdg = os.environ.get("XDG_CONFIG_HOME") or os.path.join(
        os.path.expanduser("~"), ".config"
    )
    parser = configparser.ConfigParser(
        strict=False, allow_no_value=True, interpolation=None
    )
    try:
        # later files override earlier ones, as with git
        parser.read(
            [os.path.join(xdg, "git", "config"), os.path.expanduser("~/.gitconfig")],
            encoding="utf-8",
        )
        value = parser.get("core", "excludesfile", fallback=None)
    except (configparser.Error, UnicodeDecodeError):
        value = None
    if value:
        return Path(os.path.expanduser(value.strip().strip('"')))
    return Path(xdg, "git", "ignore")


def find_repository(directory: str) -> Optional[str]:
    """Closest directory at or above *directory* holding a ``.git`` entry."""
    current = os.path.abspath(directory)
    while True:
        if os.path.exists(os.path.join(current, ".git")):
            return current
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def _relative(path: str, base: str, is_dir: bool) -> str:
    rel = os.path.relpath(path, base).replace(os.sep, "/")
    return rel + "/" if is_dir else rel


class IgnoreRules:
    """
    Stack of ``(base directory, spec)`` layers active for one directory.

    Layers are ordered from least to most specific: global excludes, the
    repository's ``info/exclude``, then ``.gitignore`` and ``.ignore`` of each
    directory from the repository root down. The most specific layer with a
    matching pattern decides, so a ``!pattern`` deeper down re-includes what
    an outer layer ignored.
    """

    def __init__(self, layers: Sequence[Tuple[str, pathspec.PathSpec]] = ()) -> None:
        self._layers: Tuple[Tuple[str, pathspec.PathSpec], ...] = tuple(layers)

    @classmethod
    def for_root(cls, root: str, onerror: Optional[ErrorHandler] = None) -> "IgnoreRules":
        """
        Rules in force at *root* before its own ignore files are read.

        Inside a repository this covers every ancestor between the repository
        root and *root*; outside one, only the global excludes apply.
        """
        repo = find_repository(root)
        base = repo or root
        layers = _load_layers(base, [global_excludes_file()], onerror)
        if repo is None:
            return cls(layers)

        layers += _load_layers(repo, [Path(repo, ".git", "info", "exclude")], onerror)
        target = os.path.abspath(root)
        ancestors = []
        current = target
        while current != repo:
            current = os.path.dirname(current)
            ancestors.append(current)
        for directory in reversed(ancestors):
            layers += _load_layers(
                directory, [Path(directory, name) for name in IGNORE_FILES], onerror
            )
        return cls(layers)

    def descend(self, directory: str, onerror: Optional[ErrorHandler] = None) -> "IgnoreRules":
        candidates = [Path(directory, name) for name in IGNORE_FILES]
        layers = _load_layers(directory, candidates, onerror)
        if not layers:
            return self
        return IgnoreRules(self._layers + tuple(layers))

    def is_ignored(self, path: str, is_dir: bool) -> bool:
        for base, spec in reversed(self._layers):
            result = spec.check_file(_relative(path, base, is_dir))
            if result.include is not None:
                return result.include
        return False


def _load_layers(
    base: str, candidates: List[Path], onerror: Optional[ErrorHandler]
) -> List[Tuple[str, pathspec.PathSpec]]:
    layers = []
    for path in candidates:
        if not path.is_file():
            continue
        try:
            layers.append((base, load_ignore_file(path)))
        except IgnoreFileError as e:
            _report(e, onerror)
    return layers


def _report(exc: Exception, onerror: Optional[ErrorHandler]) -> None:
    if onerror is None:
        raise exc
    onerror(exc)


# Walk
def walk_entries(config: RunConfig, onerror: Optional[ErrorHandler] = None) -> Iterator[Entry]:
    """
    Yield the root, then every entry below it depth-first.

    Children of a directory are visited in name order, each directory's
    contents right after the directory itself. Hidden and ignored entries are
    pruned here; they are never yielded and never descended into. Patterns
    from ``config.extra_ignore`` always exclude, whatever the ignore files
    say. Access errors go to *onerror* (re-raised when it is ``None``) and the
    walk carries on with the next entry.
    """
    root = config.root
    rules = IgnoreRules()
    if config.use_ignore_files:
        rules = IgnoreRules.for_root(root, onerror)

    yield Entry(root, is_file=os.path.isfile(root))
    yield from _walk_dir(root, rules, config, onerror)


def _walk_dir(
    directory: str,
    rules: IgnoreRules,
    config: RunConfig,
    onerror: Optional[ErrorHandler],
) -> Iterator[Entry]:
    if config.use_ignore_files:
        rules = rules.descend(directory, onerror)
    try:
        with os.scandir(directory) as it:
            children = sorted(it, key=lambda e: e.name)
    except OSError as e:
        _report(e, onerror)
        return

    for child in children:
        if not config.include_hidden and is_hidden(child.name):
            continue
        try:
            is_dir = child.is_dir(follow_symlinks=False)
            is_file = child.is_file()
        except OSError as e:
            _report(e, onerror)
            continue
        if rules.is_ignored(child.path, is_dir):
            continue
        extra = config.extra_ignore
        if extra is not None and extra.match_file(_relative(child.path, config.root, is_dir)):
            continue
        yield Entry(child.path, is_file=is_file)
        if is_dir:
            yield from _walk_dir(child.path, rules, config, onerror)
