"""
appstorage Thread Affinity — Keep blocking filesystem work off the main thread.

A ThreadAffinity names the thread that must not block (a UI thread, or the
thread running the asyncio event loop) and the executor that takes the work
instead. It is passed explicitly to the filesystem and every entry it
creates; there is no ambient registration.

    affinity = ThreadAffinity.capture()          # this thread must not block
    switch = switch_off_main_thread(affinity, token)
    result = await switch.run(os.listdir, path)

State machine of a ThreadSwitch:

    NOT_STARTED ──(cancel check)──► COMPLETED_INLINE
                                 └► SUSPENDED ──► RESUMED_ON_WORKER
                                              └► CANCELED
"""

from __future__ import annotations

import asyncio
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from appstorage.engine.config import ThreadingConfig
from appstorage.engine.errors import OperationCanceledError

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------

class CancellationToken:
    """
    Read-only view of a cancellation request.

    Obtained from CancellationTokenSource.token. ``CancellationToken.NONE``
    can never be canceled.
    """

    NONE: "CancellationToken"

    __slots__ = ("_event",)

    def __init__(self, event: Optional[threading.Event] = None):
        self._event = event

    @property
    def can_be_canceled(self) -> bool:
        return self._event is not None

    @property
    def is_cancellation_requested(self) -> bool:
        return self._event is not None and self._event.is_set()

    def throw_if_cancellation_requested(self) -> None:
        """Raise OperationCanceledError carrying this token if canceled."""
        if self.is_cancellation_requested:
            raise OperationCanceledError(token=self)

    def __repr__(self) -> str:
        return f"<CancellationToken canceled={self.is_cancellation_requested}>"


CancellationToken.NONE = CancellationToken()


class CancellationTokenSource:
    """Owner side of a cancellation request. Thread-safe."""

    def __init__(self):
        self._event = threading.Event()
        self._token = CancellationToken(self._event)

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def is_cancellation_requested(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()


def ensure_token(token: Optional[CancellationToken]) -> CancellationToken:
    return token if token is not None else CancellationToken.NONE


# ---------------------------------------------------------------------------
# Thread affinity
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ThreadAffinity:
    """
    Which thread must not run blocking I/O, and where that I/O goes instead.

    main_thread_id: ident of the protected thread; None means no thread is
                    protected and all work completes inline.
    executor:       target for offloaded work; None uses the event loop's
                    default executor.
    """

    main_thread_id: Optional[int] = None
    executor: Optional[Executor] = None

    @classmethod
    def capture(cls, executor: Optional[Executor] = None) -> "ThreadAffinity":
        """Designate the calling thread as the main thread."""
        return cls(main_thread_id=threading.get_ident(), executor=executor)

    @classmethod
    def inline(cls) -> "ThreadAffinity":
        return cls()

    def requires_offload(self) -> bool:
        return self.main_thread_id is not None and threading.get_ident() == self.main_thread_id


class SwitchState(str, Enum):
    NOT_STARTED = "not_started"
    COMPLETED_INLINE = "completed_inline"
    SUSPENDED = "suspended"
    RESUMED_ON_WORKER = "resumed_on_worker"
    CANCELED = "canceled"


class ThreadSwitch:
    """
    One-shot suspension point produced by switch_off_main_thread().

    ``run`` either calls the function right away on the current thread or,
    when the affinity protects the current thread, suspends the caller until
    a worker has run it. The token is observed again when the work resumes.
    """

    def __init__(self, affinity: ThreadAffinity, token: CancellationToken):
        self._affinity = affinity
        self._token = token
        self._offload = affinity.requires_offload()
        self.state = SwitchState.NOT_STARTED

    @property
    def is_completed(self) -> bool:
        """True when run() will not suspend."""
        return not self._offload

    def _observe_cancellation(self) -> None:
        try:
            self._token.throw_if_cancellation_requested()
        except OperationCanceledError:
            self.state = SwitchState.CANCELED
            raise

    async def run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        if self.state is not SwitchState.NOT_STARTED:
            raise RuntimeError(f"ThreadSwitch already used (state={self.state.value})")

        if not self._offload:
            self._observe_cancellation()
            self.state = SwitchState.COMPLETED_INLINE
            return func(*args, **kwargs)

        self.state = SwitchState.SUSPENDED

        def _resume() -> T:
            self._observe_cancellation()
            self.state = SwitchState.RESUMED_ON_WORKER
            return func(*args, **kwargs)

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._affinity.executor, _resume)


def switch_off_main_thread(
    affinity: Optional[ThreadAffinity] = None,
    cancellation_token: Optional[CancellationToken] = None,
) -> ThreadSwitch:
    """
    Start a thread switch. Raises OperationCanceledError immediately if the
    token is already canceled, before any switching decision is made.
    """
    token = ensure_token(cancellation_token)
    token.throw_if_cancellation_requested()
    return ThreadSwitch(affinity or ThreadAffinity(), token)


def affinity_from_config(config: Optional[ThreadingConfig] = None) -> ThreadAffinity:
    """
    Build the affinity for the calling thread from ThreadingConfig.

    With offloading enabled the calling thread becomes the protected main
    thread; max_workers sizes a dedicated pool, otherwise the loop's default
    executor is used.
    """
    config = config or ThreadingConfig()
    if not config.offload_from_main_thread:
        return ThreadAffinity()
    executor = None
    if config.max_workers:
        executor = ThreadPoolExecutor(
            max_workers=config.max_workers, thread_name_prefix="appstorage-io"
        )
    return ThreadAffinity.capture(executor)
