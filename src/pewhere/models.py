import os
from enum import StrEnum
from typing import Iterable, TypeVar


class Architecture(StrEnum):
    """Binary architecture of a matched file.

    NONE covers everything that is not a valid PE image, including files that are
    missing or unreadable at classification time.
    """
    NONE = 'none'
    X32 = 'x32'
    X64 = 'x64'


class DirectoryFileMatch:
    """A file named ``file_name`` confirmed to exist in ``directory``.

    Two matches are equal when both fields are equal after ``os.path.normcase``, so
    comparisons are case-insensitive exactly on platforms whose paths are.
    """
    __slots__ = ('_directory', '_file_name')

    def __init__(self, directory: str, file_name: str):
        self._directory = directory
        self._file_name = file_name

    @property
    def directory(self) -> str:
        return self._directory

    @property
    def file_name(self) -> str:
        return self._file_name

    @property
    def path(self) -> str:
        return os.path.join(self._directory, self._file_name)

    def _key(self):
        return os.path.normcase(self._directory), os.path.normcase(self._file_name)

    def __eq__(self, other):
        if not isinstance(other, DirectoryFileMatch):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return f"{type(self).__name__}(directory={self._directory!r}, file_name={self._file_name!r})"


class ClassifiedMatch(DirectoryFileMatch):
    """A DirectoryFileMatch together with the architecture of the file."""
    __slots__ = ('_architecture',)

    def __init__(self, directory: str, file_name: str, architecture: Architecture):
        super().__init__(directory, file_name)
        self._architecture = Architecture(architecture)

    @classmethod
    def from_match(cls, match: DirectoryFileMatch, architecture: Architecture) -> 'ClassifiedMatch':
        return cls(match.directory, match.file_name, architecture)

    @property
    def architecture(self) -> Architecture:
        return self._architecture

    def _key(self):
        return super()._key() + (self._architecture,)

    def __repr__(self):
        return (f"{type(self).__name__}(directory={self.directory!r}, file_name={self.file_name!r}, "
                f"architecture={self._architecture!r})")


M = TypeVar('M', bound=ClassifiedMatch)


def filter_by_architecture(matches: Iterable[M], architecture: Architecture | None) -> list[M]:
    """Keep matches of the requested architecture, or all of them when it is None."""
    if architecture is None:
        return list(matches)

    architecture = Architecture(architecture)
    return [match for match in matches if match.architecture == architecture]
