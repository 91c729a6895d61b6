"""
Cancellation tokens for oracle-calling operations.

An operation checks its token after the oracle responds and before touching
any state, so a caller that went away (or a service that shut down) never
has a stale result applied.
"""

import threading
import uuid
from typing import Callable, Optional, Set

from healthwatch.exceptions import OperationCancelled


class CancellationToken:
    """Cooperative cancellation flag for one request."""

    def __init__(self, operation: str = ""):
        self.id = uuid.uuid4().hex
        self.operation = operation
        self.reason: Optional[str] = None
        self._event = threading.Event()
        self._on_cancel: Optional[Callable[["CancellationToken"], None]] = None

    def cancel(self, reason: str = "Cancelled by caller") -> None:
        """Mark the token cancelled; the first reason is kept."""
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()
        if self._on_cancel is not None:
            self._on_cancel(self)

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, operation: Optional[str] = None) -> None:
        """
        Raises:
            OperationCancelled: If the token was cancelled
        """
        if self.cancelled:
            name = operation or self.operation or "operation"
            raise OperationCancelled(
                f"{name} was cancelled: {self.reason}",
                details={"operation": name, "token_id": self.id, "reason": self.reason}
            )

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"CancellationToken(id={self.id!r}, operation={self.operation!r}, {state})"


class TokenRegistry:
    """
    Tracks outstanding tokens so they can all be cancelled at shutdown.

    A token leaves the registry when it is released or cancelled. A token
    that is issued but never used, released or cancelled stays until
    cancel_all().
    """

    def __init__(self):
        self._tokens: Set[CancellationToken] = set()
        self._lock = threading.Lock()
        self._closed = False
        self._close_reason = "Service shut down"

    @property
    def closed(self) -> bool:
        return self._closed

    def issue(self, operation: str = "") -> CancellationToken:
        """Create and track a token; tokens issued after close start cancelled."""
        token = CancellationToken(operation)
        self.track(token)
        return token

    def track(self, token: CancellationToken) -> None:
        with self._lock:
            closed = self._closed
            if not closed and not token.cancelled:
                token._on_cancel = self.release
                self._tokens.add(token)
        if closed:
            token.cancel(self._close_reason)

    def release(self, token: CancellationToken) -> None:
        with self._lock:
            self._tokens.discard(token)

    def cancel_all(self, reason: str = "Service shut down") -> int:
        """Cancel every outstanding token and refuse new ones."""
        with self._lock:
            self._closed = True
            self._close_reason = reason
            tokens = list(self._tokens)
            self._tokens.clear()
        for token in tokens:
            token.cancel(reason)
        return len(tokens)

    def __len__(self) -> int:
        return len(self._tokens)
