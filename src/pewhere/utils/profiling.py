"""cProfile hooks enabled by the PEWHERE_PROFILE environment variable.

When PEWHERE_PROFILE names a directory, every profiled call writes a .prof file into
a per-session subdirectory ``{timestamp_ms}_{main_pid}``. Worker processes inherit
the session name through _PEWHERE_PROFILE_SESSION so that one run lands in one place.
"""
import cProfile
import functools
import itertools
import os
import time
from pathlib import Path
from typing import Callable, TypeVar, ParamSpec

P = ParamSpec('P')
T = TypeVar('T')

PROFILE_ENV = 'PEWHERE_PROFILE'
_SESSION_ENV = '_PEWHERE_PROFILE_SESSION'

_sequence = itertools.count()


def _session_name() -> str:
    session = os.environ.get(_SESSION_ENV)
    if session:
        return session
    return f"{int(time.time() * 1000)}_{os.getpid()}"


def profile_directory() -> Path | None:
    base = os.environ.get(PROFILE_ENV)
    if not base:
        return None
    return Path(base) / _session_name()


def profiled(prefix: str) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Profile the decorated function into ``{prefix}_{pid}_{seq}.prof`` when enabled."""
    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            directory = profile_directory()
            if directory is None:
                return func(*args, **kwargs)

            directory.mkdir(parents=True, exist_ok=True)
            profile_file = directory / f"{prefix}_{os.getpid()}_{next(_sequence)}.prof"

            profiler = cProfile.Profile()
            try:
                profiler.enable()
                return func(*args, **kwargs)
            finally:
                profiler.disable()
                profiler.dump_stats(str(profile_file))

        return wrapper

    return decorator


def profile_main(func: Callable[P, T]) -> Callable[P, T]:
    """Profile the entry point and pin the session directory for worker processes."""
    profiled_func = profiled('main')(func)

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        if os.environ.get(PROFILE_ENV):
            os.environ[_SESSION_ENV] = _session_name()
        return profiled_func(*args, **kwargs)

    return wrapper


profile_worker = profiled('worker')
