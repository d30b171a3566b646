"""
Request context: cancellation and deadline for a single operation.

Operations check the context before every remote call and between the
items of a listing, so a caller on another thread can stop a long
``delete_secrets`` batch::

    ctx = RequestContext(timeout=30)
    worker = threading.Thread(target=sm.delete_secrets, args=("lb-42",), kwargs={"ctx": ctx})
    worker.start()
    ...
    ctx.cancel()
"""

from __future__ import annotations

import threading
import time

from cloudkeys.base.exceptions import OperationCancelledError, OperationTimeoutError


class RequestContext:
    """Cancellation flag plus optional deadline, shared by nested calls."""

    def __init__(self, timeout: float | None = None) -> None:
        self._cancelled = threading.Event()
        self.deadline: float | None = (
            time.monotonic() + timeout if timeout is not None else None
        )

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def check(self) -> None:
        """Raise if the request should not proceed.

        Raises:
            OperationCancelledError: If :meth:`cancel` was called.
            OperationTimeoutError: If the deadline has passed.
        """
        if self._cancelled.is_set():
            raise OperationCancelledError("request cancelled")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise OperationTimeoutError("request deadline exceeded")


__all__ = ["RequestContext"]
