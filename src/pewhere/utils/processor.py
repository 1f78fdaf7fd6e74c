import asyncio
import logging
import multiprocessing
import os
from asyncio import TaskGroup
from multiprocessing.pool import Pool
from typing import Awaitable, Sequence

from ..cancellation import CancellationToken
from ..classifier import classify
from ..models import Architecture, DirectoryFileMatch, ClassifiedMatch
from .profiling import profile_worker
from .throttler import Throttler

logger = logging.getLogger(__name__)


@profile_worker
def classify_path(path: str) -> str:
    return str(classify(path))


class Processor:
    """Runs header classification in a pool of worker processes.

    Each classification opens its own file handle and shares no state, so a batch
    can be spread across the pool freely.
    """

    def __init__(self, concurrency: int | None = None):
        if concurrency is None:
            concurrency = multiprocessing.cpu_count()

        self._concurrency = concurrency
        self._pool: Pool = Pool(self._concurrency)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self._pool.close()

    @property
    def concurrency(self):
        return self._concurrency

    def classify(self, path: str | os.PathLike) -> Awaitable[Architecture]:
        path = os.fspath(path)
        logger.debug(f"Starting classification for: {path}")

        async def evaluate_and_convert():
            result = Architecture(await self._evaluate(classify_path, path))
            logger.debug(f"Completed classification for: {path} ({result})")
            return result

        return evaluate_and_convert()

    def _evaluate(self, func, *args):
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        self._pool.apply_async(func, args=args,
                               callback=lambda v: loop.call_soon_threadsafe(future.set_result, v),
                               error_callback=lambda e: loop.call_soon_threadsafe(future.set_exception, e))

        return future


async def classify_all(
        matches: Sequence[DirectoryFileMatch],
        processor: Processor | None = None,
        cancel: CancellationToken | None = None) -> list[ClassifiedMatch]:
    """Classify every match, returning results in the order of ``matches``.

    Without a processor the files are classified one after another in the calling
    thread. With one, classifications are spread over its worker pool, at most twice
    its concurrency in flight, and reassembled by input position.
    """
    if processor is None:
        results = []
        for match in matches:
            if cancel is not None:
                cancel.raise_if_cancelled()
            results.append(ClassifiedMatch.from_match(match, classify(match.path)))
        return results

    architectures: list[Architecture | None] = [None] * len(matches)

    async def classify_one(index: int, match: DirectoryFileMatch):
        architectures[index] = await processor.classify(match.path)

    async with TaskGroup() as tg:
        throttler = Throttler(tg, processor.concurrency * 2)
        for index, match in enumerate(matches):
            # Raising inside the group would surface as an ExceptionGroup
            if cancel is not None and cancel.cancelled:
                break
            await throttler.schedule(classify_one(index, match))

    if cancel is not None:
        cancel.raise_if_cancelled()

    return [ClassifiedMatch.from_match(match, architecture)
            for match, architecture in zip(matches, architectures)]
