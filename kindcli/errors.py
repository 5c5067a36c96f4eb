"""Error wrapping, cause chains and aggregation of several errors."""

from __future__ import annotations

import traceback
from collections.abc import Callable, Iterable, Iterator
from traceback import StackSummary

__all__ = [
    "AggregateError",
    "WrappedError",
    "new_aggregate",
    "errors",
    "wrap",
    "wrapf",
    "stack_trace",
]


def _capture_stack() -> StackSummary:
    # Drop the frames of this helper and of the constructor calling it.
    return StackSummary.from_list(traceback.extract_stack()[:-2])


def _iter_chain(err: BaseException | None) -> Iterator[BaseException]:
    """Yield ``err`` and then each of its causes, outermost first."""
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        cause = getattr(err, "cause", None)
        if not isinstance(cause, BaseException):
            cause = err.__cause__
        err = cause


def _is(err: BaseException, target: BaseException | type) -> bool:
    for link in _iter_chain(err):
        if isinstance(target, type):
            if isinstance(link, target):
                return True
        elif link is target:
            return True
    return False


class WrappedError(Exception):
    """An error annotated with a message and the stack where it was wrapped."""

    def __init__(self, message: str, cause: BaseException) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.__cause__ = cause
        self.stack = _capture_stack()

    def __str__(self) -> str:
        return f"{self.message}: {self.cause}"


class AggregateError(Exception):
    """Several errors held together without a single meaning of their own."""

    def __init__(self, errors: Iterable[BaseException]) -> None:
        self.errors = list(errors)
        super().__init__(*self.errors)
        self.stack = _capture_stack()

    def _visit(self, predicate: Callable[[BaseException], bool]) -> bool:
        for err in self.errors:
            if isinstance(err, AggregateError):
                if err._visit(predicate):
                    return True
            elif predicate(err):
                return True
        return False

    def __str__(self) -> str:
        if not self.errors:
            return ""
        if len(self.errors) == 1:
            return str(self.errors[0])
        seen: list[str] = []

        def collect(err: BaseException) -> bool:
            msg = str(err)
            if msg not in seen:
                seen.append(msg)
            return False

        self._visit(collect)
        result = ", ".join(seen)
        if len(seen) == 1:
            return result
        return f"[{result}]"

    def matches(self, target: BaseException | type) -> bool:
        """Tell whether any held error is, or is caused by, ``target``.

        ``target`` may be an error instance (matched by identity) or an
        exception class (matched with ``isinstance``).
        """
        return self._visit(lambda err: _is(err, target))


def _flatten(errlist: Iterable[BaseException | None]) -> list[BaseException]:
    result: list[BaseException] = []
    for err in errlist:
        if err is None:
            continue
        if isinstance(err, AggregateError):
            result.extend(_flatten(err.errors))
        else:
            result.append(err)
    return result


def new_aggregate(errlist: Iterable[BaseException | None]) -> BaseException | None:
    """Combine errors into one, flattening nested aggregates.

    ``None`` entries are dropped. Returns ``None`` when nothing is left, the
    sole error when one is left, and an :class:`AggregateError` otherwise.
    """
    flat = _flatten(errlist)
    if not flat:
        return None
    if len(flat) == 1:
        return flat[0]
    return AggregateError(flat)


def errors(err: BaseException | None) -> list[BaseException]:
    """Return the errors of the deepest aggregate in ``err``'s cause chain."""
    found: AggregateError | None = None
    for link in _iter_chain(err):
        if isinstance(link, AggregateError):
            found = link
    return list(found.errors) if found is not None else []


def wrap(err: BaseException | None, message: str) -> WrappedError | None:
    """Annotate ``err`` with ``message``; ``None`` stays ``None``."""
    if err is None:
        return None
    return WrappedError(message, err)


def wrapf(err: BaseException | None, fmt: str, *args: object) -> WrappedError | None:
    """Like :func:`wrap`, with the message built by %-formatting."""
    if err is None:
        return None
    return WrappedError(fmt % args if args else fmt, err)


def stack_trace(err: BaseException | None) -> StackSummary | None:
    """Return the deepest stack trace recorded in ``err``'s cause chain."""
    found: StackSummary | None = None
    for link in _iter_chain(err):
        stack = getattr(link, "stack", None)
        if isinstance(stack, StackSummary):
            found = stack
        elif link.__traceback__ is not None:
            found = traceback.extract_tb(link.__traceback__)
    return found