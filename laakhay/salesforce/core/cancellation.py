"""Cooperative cancellation for page fetches.

Architecture:
    A CancellationToken is threaded through every call that can block on
    network I/O. The pagination loop checks it before each page request and
    the transport races the in-flight request against it, so a fired token
    aborts the request instead of letting it run to completion.

Design Decisions:
    - asyncio.Event backed: waiters wake as soon as the token fires
    - Callbacks: linked tokens and one-shot timers fire through the same path
    - Loop-bound: cancel() must be called from the event loop thread
      (use loop.call_soon_threadsafe(token.cancel) from other threads)

See Also:
    - DeadlineGuard: Arms a token from a timeout and/or an external token
    - HTTPClient: Passes the token to CancellationToken.run()
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from .exceptions import CancellationError

T = TypeVar("T")


class CancellationToken:
    """One-shot cancellation signal shared by a single query invocation."""

    def __init__(self) -> None:
        self._cancelled = False
        self._event: asyncio.Event | None = None
        self._callbacks: list[Callable[[], None]] = []
        self._parents: list[CancellationToken] = []

    @classmethod
    def link(cls, *parents: CancellationToken | None) -> CancellationToken:
        """Create a token that fires when any of the given parents fires.

        Args:
            parents: Tokens to follow; ``None`` entries are ignored

        Returns:
            New child token. Call ``detach()`` once it is no longer needed so
            the parents drop their reference to it.
        """
        child = cls()
        for parent in parents:
            if parent is None:
                continue
            child._parents.append(parent)
            parent.add_callback(child.cancel)
        return child

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Fire the token. Repeated calls are no-ops."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._event is not None:
            self._event.set()
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Register a callback run once when the token fires.

        If the token already fired the callback runs immediately.
        """
        if self._cancelled:
            callback()
            return
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def detach(self) -> None:
        """Stop following the parents this token was linked to."""
        for parent in self._parents:
            parent.remove_callback(self.cancel)
        self._parents.clear()

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise CancellationError()

    async def wait(self) -> None:
        """Block until the token fires."""
        if self._cancelled:
            return
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()

    def cancel_after(self, delay: float) -> asyncio.TimerHandle:
        """Arm a one-shot timer that fires the token after ``delay`` seconds.

        The returned handle must be cancelled by the caller on every exit path.
        """
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, self.cancel)

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first.

        Raises:
            CancellationError: If the token fired before or while awaiting. The
                underlying task is cancelled and awaited before raising.
        """
        if self._cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise CancellationError()

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()

        if task in done:
            return task.result()

        # Collect the aborted task so its cancellation is not reported as unretrieved
        await asyncio.gather(task, return_exceptions=True)
        raise CancellationError()
