from __future__ import annotations

import logging
from typing import Callable

from app.schemas.cv import AnalysisResponse, RequestState, RequestStatus

logger = logging.getLogger(__name__)

StateListener = Callable[[RequestState], None]


class RequestLifecycle:
    """Holds the outcome of the one analysis currently shown to the user.

    The only mutations are ``begin``, ``resolve``, ``fail`` and ``reset``.
    ``begin`` hands out a request id; ``resolve``/``fail`` called with an id
    that is no longer current are dropped, so a slow superseded run cannot
    overwrite a newer one. Calls without an id always apply.
    """

    def __init__(self) -> None:
        self._state = RequestState()
        self._last_id = 0
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def status(self) -> RequestStatus:
        return self._state.status

    @property
    def result(self) -> AnalysisResponse | None:
        return self._state.result

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def current_request_id(self) -> int:
        return self._state.request_id

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def begin(self) -> int:
        self._last_id += 1
        self._apply(RequestState(status="pending", request_id=self._last_id))
        return self._last_id

    def resolve(self, response: AnalysisResponse, request_id: int | None = None) -> bool:
        if response is None:
            raise TypeError("resolve() needs an AnalysisResponse; use fail() for errors")
        if self._is_stale(request_id, "resolve"):
            return False
        self._apply(RequestState(status="success", result=response, request_id=self._state.request_id))
        return True

    def fail(self, message: str, request_id: int | None = None, *, code: str | None = None) -> bool:
        if self._is_stale(request_id, "fail"):
            return False
        self._apply(
            RequestState(
                status="error",
                error=message or "Analysis failed.",
                error_code=code,
                request_id=self._state.request_id,
            )
        )
        return True

    def reset(self) -> None:
        # A fresh id makes every run still in flight stale.
        self._last_id += 1
        self._apply(RequestState(status="idle", request_id=self._last_id))

    def _is_stale(self, request_id: int | None, event: str) -> bool:
        if request_id is None or request_id == self._state.request_id:
            return False
        logger.debug(
            "analysis_lifecycle_stale_%s request_id=%s current=%s", event, request_id, self._state.request_id
        )
        return True

    def _apply(self, state: RequestState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
