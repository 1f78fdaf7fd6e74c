import asyncio
import logging
import os
from pathlib import Path
from typing import Iterable

from .cancellation import CancellationToken
from .errors import InvalidArgument
from .models import DirectoryFileMatch


def normalize_directory(path: str | os.PathLike) -> str:
    """Normalize a directory path for comparison without touching the filesystem.

    Relative paths are anchored at the current working directory and ``.``/``..``
    components are collapsed. Symlinks are not resolved.
    """
    path = Path(path)
    path = path if path.is_absolute() else Path.cwd() / path
    return os.path.normpath(str(path))


def path_key(path: str) -> str:
    """Case-insensitive comparison key for an already normalized path."""
    return path.casefold()


def _require_entries(values: Iterable[str | os.PathLike] | None, name: str) -> list[str]:
    if values is None:
        raise InvalidArgument(f"{name} must not be empty")

    entries = [os.fspath(v) for v in values]
    if not entries:
        raise InvalidArgument(f"{name} must not be empty")

    for entry in entries:
        if not entry.strip():
            raise InvalidArgument(f"{name} must not contain empty entries")

    return entries


class TreeSearcher:
    """Locates files by name across directory trees.

    The walk keeps an explicit frontier instead of recursing, so deep trees do not
    grow the call stack, and it yields to the event loop after each directory so a
    long walk shares the loop with other tasks. Directories that cannot be
    enumerated are logged and skipped; they never fail the search.

    Skip entries are compared against whole normalized paths, never as prefixes. A
    skip entry only removes a root that is exactly equal to it, or a subdirectory
    produced by enumeration that is exactly equal to it.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    async def search(
            self,
            roots: Iterable[str | os.PathLike],
            target_names: Iterable[str],
            skip: Iterable[str | os.PathLike] | None = None,
            cancel: CancellationToken | None = None) -> list[DirectoryFileMatch]:
        """Find every directory under ``roots`` that contains one of ``target_names``.

        Args:
            roots: Directories to start from
            target_names: File names to look for, compared case-insensitively for deduplication
            skip: Directories whose subtrees are excluded from the walk
            cancel: Token polled once per visited directory

        Returns:
            Deduplicated matches in discovery order

        Raises:
            InvalidArgument: roots or target_names are empty or contain blank entries
            Canceled: cancellation was requested before the walk finished
        """
        root_list = _require_entries(roots, 'roots')
        name_list = _require_entries(target_names, 'target_names')

        file_names = []
        seen_names = set()
        for name in name_list:
            name = name.strip()
            if name.casefold() not in seen_names:
                seen_names.add(name.casefold())
                file_names.append(name)

        skip_set = set()
        for entry in skip or ():
            entry = os.fspath(entry).strip()
            if entry:
                skip_set.add(path_key(normalize_directory(entry)))

        visited: set[str] = set()
        frontier: list[str] = []

        for root in root_list:
            root = normalize_directory(root.strip())
            key = path_key(root)
            if key in skip_set:
                self._logger.info(f"Skipping root: {root}")
                continue
            if key not in visited:
                visited.add(key)
                frontier.append(root)

        results: list[DirectoryFileMatch] = []

        while frontier:
            if cancel is not None:
                cancel.raise_if_cancelled()

            current = frontier.pop()

            for file_name in file_names:
                if os.path.isfile(os.path.join(current, file_name)):
                    results.append(DirectoryFileMatch(current, file_name))
                    self._logger.info(f"Found file: {file_name} in {current}")

            for subdirectory in self._list_subdirectories(current):
                key = path_key(subdirectory)
                if key in skip_set:
                    self._logger.info(f"Skipping directory: {subdirectory}")
                    continue
                if key not in visited:
                    visited.add(key)
                    frontier.append(subdirectory)

            await asyncio.sleep(0)

        return list(dict.fromkeys(results))

    def _list_subdirectories(self, directory: str) -> list[str]:
        try:
            with os.scandir(directory) as entries:
                return [os.path.normpath(entry.path) for entry in entries if entry.is_dir()]
        except PermissionError:
            self._logger.info(f"Access denied: {directory}")
        except OSError as e:
            self._logger.info(f"Failed to enumerate {directory}: {e}")
        return []
