import asyncio
import logging
import os
import time
from typing import Iterable

from .cancellation import CancellationToken
from .models import Architecture, ClassifiedMatch, filter_by_architecture
from .searcher import TreeSearcher
from .settings import Settings
from .utils.processor import Processor, classify_all

logger = logging.getLogger(__name__)


def split_list(value: str | None) -> list[str]:
    """Split a comma-separated option value into trimmed, expanded entries.

    Empty entries are dropped. Environment variables (``$HOME``, ``${HOME}``, and
    ``%HOME%`` on Windows) and a leading ``~`` are expanded in each entry.
    """
    if value is None:
        return []

    entries = []
    for entry in value.split(','):
        entry = entry.strip()
        if entry:
            entries.append(os.path.expanduser(os.path.expandvars(entry)))
    return entries


class Where:
    """Workflow layer combining the tree search with header classification.

    Where owns nothing but references: the processor and settings are supplied by the
    caller and every find() call builds its own searcher state, so separate calls
    share no mutable state.
    """

    def __init__(self, processor: Processor | None = None, settings: Settings | None = None):
        """Initialize the workflow layer.

        Args:
            processor: Worker pool used to classify matches; classification runs in the
                       calling thread when None
            settings: Source of default skip directories; none are added when None
        """
        self._processor = processor
        self._settings = settings
        self._searcher = TreeSearcher()

    def find(
            self,
            file_names: Iterable[str],
            directories: Iterable[str],
            skip_directories: Iterable[str] | None = None,
            architecture: Architecture | None = None,
            cancel: CancellationToken | None = None) -> list[ClassifiedMatch]:
        """Search ``directories`` for ``file_names`` and classify what is found.

        Args:
            file_names: File names to look for
            directories: Root directories of the search
            skip_directories: Directories excluded from the walk, in addition to the
                              ones configured in settings
            architecture: Keep only matches of this architecture; keep all when None
            cancel: Cancellation token checked during the walk and the classification

        Returns:
            Classified matches in discovery order

        Raises:
            InvalidArgument: file_names or directories are empty
            Canceled: cancellation was requested
        """
        return asyncio.run(self.find_async(file_names, directories, skip_directories, architecture, cancel))

    async def find_async(
            self,
            file_names: Iterable[str],
            directories: Iterable[str],
            skip_directories: Iterable[str] | None = None,
            architecture: Architecture | None = None,
            cancel: CancellationToken | None = None) -> list[ClassifiedMatch]:
        skip = list(skip_directories or ())
        if self._settings is not None:
            skip.extend(self._settings.skip_directories())

        started = time.monotonic()
        matches = await self._searcher.search(directories, file_names, skip, cancel)
        logger.info(f"Search found {len(matches)} file(s) in {time.monotonic() - started:.3f}s")

        classified = await classify_all(matches, self._processor, cancel)
        return filter_by_architecture(classified, architecture)
