from __future__ import annotations

import asyncio
from typing import Callable

CancelCallback = Callable[["CancellationToken"], None]


class CancellationToken:
    """One-shot cancellation signal shared between a caller and an in-flight call."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None
        self._callbacks: list[CancelCallback] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str = "cancelled") -> None:
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()
        for callback in list(self._callbacks):
            callback(self)

    async def wait(self) -> None:
        await self._event.wait()

    def add_callback(self, callback: CancelCallback) -> Callable[[], None]:
        if self.cancelled:
            callback(self)
            return lambda: None
        self._callbacks.append(callback)

        def remove() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return remove


class TimeoutToken(CancellationToken):
    def __init__(self, seconds: float):
        super().__init__()
        self.seconds = seconds
        self._handle: asyncio.TimerHandle | None = None

    def start(self) -> None:
        if self._handle is not None or self.cancelled:
            return
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.seconds, self.cancel, "timeout")

    def release(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def cancel(self, reason: str = "timeout") -> None:
        self.release()
        super().cancel(reason)


class CompositeToken(CancellationToken):
    """Triggered as soon as any of its sources is triggered; keeps that source's reason."""

    def __init__(self, sources: list[CancellationToken]):
        super().__init__()
        self.sources = sources
        self._detach: list[Callable[[], None]] = []
        for source in sources:
            self._detach.append(source.add_callback(self._on_source_cancelled))

    def _on_source_cancelled(self, source: CancellationToken) -> None:
        self.cancel(source.reason or "cancelled")

    def close(self) -> None:
        for detach in self._detach:
            detach()
        self._detach = []


def any_of(*tokens: CancellationToken | None) -> CompositeToken:
    return CompositeToken([token for token in tokens if token is not None])
