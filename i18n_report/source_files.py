import fnmatch
import glob
import os
from pathlib import Path
from typing import Generator, Iterable

from .errors import ConfigurationError
from .parser import file_types


DEFAULT_IGNORE = ("node_modules",)


def is_ignored(path: str, ignore: Iterable[str]) -> bool:
    parts = Path(path).parts
    for pattern in ignore:
        if any(fnmatch.fnmatch(part, pattern) for part in parts):
            return True
        if fnmatch.fnmatch(path, pattern):
            return True
    return False


def walk_files(
    paths: Iterable[str], extensions: tuple, ignore: tuple
) -> Generator[str, None, None]:
    """Recursively search :paths: for files that have :extensions:.

    A path may be a directory, a file or a glob pattern. Directories and
    files whose name matches one of the :ignore: patterns are skipped.
    Files named explicitly are yielded whatever their extension.
    """
    for path in paths:
        path = str(path)
        if os.path.isdir(path):
            for dirpath, dirnames, filenames in os.walk(path):
                dirnames[:] = sorted(
                    d for d in dirnames
                    if not is_ignored(os.path.join(dirpath, d), ignore))
                for filename in sorted(filenames):
                    _, ext = os.path.splitext(filename)
                    full = os.path.join(dirpath, filename)
                    if ext.lower() in extensions \
                            and not is_ignored(full, ignore):
                        yield full
        elif os.path.isfile(path):
            yield path
        else:
            for match in sorted(glob.glob(path, recursive=True)):
                _, ext = os.path.splitext(match)
                if os.path.isfile(match) and ext.lower() in extensions \
                        and not is_ignored(match, ignore):
                    yield match


def find_source_files(paths, extensions=None, ignore=DEFAULT_IGNORE):
    """Every source file under :paths:, deduplicated, in traversal order."""
    if extensions is None:
        extensions = tuple(file_types)
    files = list(dict.fromkeys(walk_files(paths, tuple(extensions),
                                          tuple(ignore))))
    if not files:
        raise ConfigurationError(
            "no source files found in " + ", ".join(map(str, paths)))
    return files
