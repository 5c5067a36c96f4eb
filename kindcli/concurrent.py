"""Running callables concurrently and collecting their errors."""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable, Sequence

from kindcli.errors import new_aggregate

__all__ = ["until_error_concurrent", "aggregate_concurrent"]


def _start_all(
    funcs: Sequence[Callable[[], object]], *, daemon: bool
) -> tuple[list[threading.Thread], queue.Queue]:
    results: queue.Queue = queue.Queue()

    def runner(func: Callable[[], object]) -> None:
        try:
            func()
        except Exception as exc:  # collected and re-raised by the caller
            results.put(exc)
        else:
            results.put(None)

    threads = [
        threading.Thread(target=runner, args=(func,), daemon=daemon) for func in funcs
    ]
    for thread in threads:
        thread.start()
    return threads, results


def until_error_concurrent(funcs: Sequence[Callable[[], object]]) -> None:
    """Run every callable in its own thread and raise the first error.

    Returns as soon as one callable fails, without waiting for the rest.
    """
    _, results = _start_all(funcs, daemon=True)
    for _ in funcs:
        err = results.get()
        if err is not None:
            raise err


def aggregate_concurrent(funcs: Sequence[Callable[[], object]]) -> None:
    """Run every callable concurrently and wait for all of them.

    One failure is raised as is; several are raised as an aggregate.
    """
    threads, results = _start_all(funcs, daemon=False)
    for thread in threads:
        thread.join()
    errs = []
    while not results.empty():
        err = results.get()
        if err is not None:
            errs.append(err)
    combined = new_aggregate(errs)
    if combined is not None:
        raise combined