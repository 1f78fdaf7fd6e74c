import asyncio
from asyncio import TaskGroup, Semaphore
from typing import Awaitable, TypeVar

T = TypeVar('T')


class Throttler:
    """Limits how many tasks scheduled through it run at the same time.

    ``schedule`` waits for a free slot before creating the task, so a producer
    feeding a large batch is paced by the consumers instead of flooding the group.
    """

    def __init__(self, task_group: TaskGroup, concurrency: int):
        if concurrency < 1:
            raise ValueError(f"concurrency must be positive: {concurrency}")

        self._task_group = task_group
        self._semaphore = Semaphore(concurrency)

    async def schedule(self, coro: Awaitable[T], name=None) -> asyncio.Task[T]:
        await self._semaphore.acquire()

        async def wrapper():
            try:
                return await coro
            finally:
                self._semaphore.release()

        try:
            return self._task_group.create_task(wrapper(), name=name)
        except BaseException:
            self._semaphore.release()
            raise
