"""
Future helpers over `concurrent.futures.Future`.

Futures are value-lineage carriers. The combinators chain through
`add_done_callback` and never block; only `settle` and `snapshot` wait:

- a failed source fails the derived future with the same exception
- a cancelled source cancels the derived future
- cancelling a derived future cancels the work it is waiting on
- an empty source makes the derived future empty

Empty futures never complete. Derived futures are `Promise`s, which record
when they became empty (a rejecting `filter`, or an empty source) so that
waiters are released at once instead of running into their timeout.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, InvalidStateError
from typing import Any, Callable, Optional

from .maybe import Maybe

logger = logging.getLogger(__name__)


class Promise(Future):
    """A Future that may instead end up empty."""

    def __init__(self):
        super().__init__()
        self._empty = False
        self._empty_lock = threading.Lock()
        self._empty_callbacks: list[Callable[[Promise], Any]] = []

    @property
    def empty(self) -> bool:
        return self._empty

    def set_empty(self) -> bool:
        """Mark the promise empty; False if it already completed or was emptied."""
        with self._empty_lock:
            if self._empty or self.done():
                return False
            self._empty = True
            callbacks, self._empty_callbacks = self._empty_callbacks, []
        for callback in callbacks:
            try:
                callback(self)
            except Exception:
                logger.exception(f"Empty callback raised for {self!r}")
        return True

    def add_empty_callback(self, fn: Callable[[Promise], Any]) -> None:
        """Call `fn(self)` once the promise is empty (immediately if it already is)."""
        with self._empty_lock:
            if not self._empty:
                self._empty_callbacks.append(fn)
                return
        fn(self)


class Never(Promise):
    """The empty future: it never completes and cannot be cancelled."""

    def __init__(self):
        super().__init__()
        self._empty = True

    def cancel(self) -> bool:
        return False


def completed(value: Any) -> Future:
    fut: Future = Future()
    fut.set_result(value)
    return fut


def failed(error: BaseException) -> Future:
    fut: Future = Future()
    fut.set_exception(error)
    return fut


def pending() -> Future:
    """The empty future: nothing will ever complete it."""
    return Never()


def is_empty(fut: Future) -> bool:
    return isinstance(fut, Promise) and fut.empty


def is_failed(fut: Future) -> bool:
    return fut.done() and not fut.cancelled() and fut.exception() is not None


def _link_cancel(derived: Future, source: Future) -> None:
    def _on_derived(d: Future) -> None:
        if d.cancelled():
            source.cancel()
    derived.add_done_callback(_on_derived)


def _link_empty(derived: Promise, source: Future) -> None:
    if isinstance(source, Promise):
        source.add_empty_callback(lambda _: derived.set_empty())


def _relay(source: Future, derived: Future, on_value: Callable[[Any], None]) -> None:
    def _done(src: Future) -> None:
        if derived.done():
            return
        if src.cancelled():
            derived.cancel()
            return
        error = src.exception()
        if error is not None:
            derived.set_exception(error)
            return
        try:
            on_value(src.result())
        except InvalidStateError:
            # derived was cancelled concurrently
            return
        except Exception as exc:
            if not derived.done():
                derived.set_exception(exc)
    source.add_done_callback(_done)


def _derive(source: Future) -> Promise:
    derived = Promise()
    _link_cancel(derived, source)
    _link_empty(derived, source)
    return derived


def map_future(fut: Future, fn: Callable[[Any], Any]) -> Future:
    if is_empty(fut):
        return pending()
    derived = _derive(fut)
    _relay(fut, derived, lambda v: derived.set_result(fn(v)))
    return derived


def flat_map_future(fut: Future, fn: Callable[[Any], Future]) -> Future:
    if is_empty(fut):
        return pending()
    derived = _derive(fut)

    def _on_value(value: Any) -> None:
        inner = fn(value)
        _link_cancel(derived, inner)
        _link_empty(derived, inner)
        _relay(inner, derived, derived.set_result)

    _relay(fut, derived, _on_value)
    return derived


def filter_future(fut: Future, predicate: Callable[[Any], bool]) -> Future:
    if is_empty(fut):
        return pending()
    derived = _derive(fut)

    def _on_value(value: Any) -> None:
        if predicate(value):
            derived.set_result(value)
        else:
            derived.set_empty()

    _relay(fut, derived, _on_value)
    return derived


def ap_future(fn_fut: Future, fut: Future) -> Future:
    return flat_map_future(fn_fut, lambda f: map_future(fut, f))


def first_completed(a: Future, b: Future) -> Future:
    """Default MonadPlus combine: `a` if it already completed, else `b`."""
    return a if a.done() else b


def wait_settled(fut: Future, timeout: Optional[float]) -> bool:
    """
    Block until `fut` completes or becomes empty. Returns False if neither
    happened within `timeout` seconds (None waits forever).
    """
    if fut.done() or is_empty(fut):
        return True
    ready = threading.Event()
    fut.add_done_callback(lambda _: ready.set())
    if isinstance(fut, Promise):
        fut.add_empty_callback(lambda _: ready.set())
    return ready.wait(timeout)


def snapshot(fut: Future, timeout: Optional[float] = 0.0) -> tuple:
    """Comparable view: ("value", v), ("error", type), ("cancelled",) or ("pending",)."""
    if timeout:
        wait_settled(fut, timeout)
    if is_empty(fut) or not fut.done():
        return ("pending",)
    if fut.cancelled():
        return ("cancelled",)
    error = fut.exception()
    if error is not None:
        return ("error", type(error))
    return ("value", fut.result())


def settle(fut: Future, timeout: Optional[float]) -> Maybe:
    """The future's value as a Maybe; failures propagate, empty or still pending is nothing."""
    if not wait_settled(fut, timeout):
        logger.warning(f"Future still pending after {timeout}s, treating as empty")
        return Maybe.nothing()
    if is_empty(fut):
        return Maybe.nothing()
    return Maybe.just(fut.result())
