"""Graceful shutdown: drain registered save actions on SIGINT/SIGTERM, flush unsaved items on normal exit.

Build one Lifecycle at process start and hand it to whatever needs to register
cleanup work. A trigger is accepted only while the coordinator is IDLE, so a
second Ctrl+C during a drain, or the atexit hook after a signal-driven exit,
is a no-op.
"""

import asyncio
import atexit
import inspect
import signal
import sys
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from config import SHUTDOWN_ACTION_TIMEOUT, SHUTDOWN_FAIL_FAST, UNSAVED_PLACES_PATH
from utils.files import write_json
from utils.logging_config import get_logger

from .descriptor import SaveDescriptor, ShutdownState
from .errors import ActionTimeoutError, HandlerInstallError, LifecycleError, SaveActionError

EXIT_OK = 0
EXIT_FAILURE = 1
HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)

_log = get_logger(__name__)


class _AlarmExpired(BaseException):
    """Raised by the SIGALRM handler; BaseException so an action's `except Exception` cannot swallow it."""


@contextmanager
def _alarm(timeout: Optional[float]):
    """Raise _AlarmExpired in the main thread if the body runs longer than `timeout` seconds.

    No-op without a timeout, off the main thread, or where setitimer is unavailable.
    """
    if not timeout or threading.current_thread() is not threading.main_thread() or not hasattr(signal, "setitimer"):
        yield
        return

    def expire(signum: int, frame: Any) -> None:
        raise _AlarmExpired()

    previous = signal.signal(signal.SIGALRM, expire)
    signal.setitimer(signal.ITIMER_REAL, timeout)
    try:
        yield
    finally:
        signal.setitimer(signal.ITIMER_REAL, 0)
        signal.signal(signal.SIGALRM, previous if previous is not None else signal.SIG_DFL)


async def _await_action(awaitable: Any, index: int, name: str) -> None:
    # Failures of the action itself, a TimeoutError included, become SaveActionError
    # here so that only wait_for's own timeout reaches the caller as TimeoutError.
    try:
        await awaitable
    except Exception as e:
        raise SaveActionError(index, name) from e


async def _await_with_deadline(awaitable: Any, index: int, name: str, timeout: Optional[float]) -> None:
    try:
        await asyncio.wait_for(_await_action(awaitable, index, name), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise ActionTimeoutError(index, name, timeout) from e


def _run_awaitable(awaitable: Any, index: int, name: str, timeout: Optional[float]) -> None:
    """Run an action's awaitable to completion on a private event loop.

    When the interrupted thread is itself inside a running loop, the private loop
    gets its own thread; wait_for still bounds it.
    """
    coro = _await_with_deadline(awaitable, index, name, timeout)
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        asyncio.run(coro)
        return

    errors: List[BaseException] = []

    def target() -> None:
        try:
            asyncio.run(coro)
        except BaseException as e:
            errors.append(e)

    worker = threading.Thread(target=target, name=f"save-action-{index}", daemon=True)
    worker.start()
    worker.join()
    if errors:
        raise errors[0]


def _call_inline(descriptor: SaveDescriptor, index: int, timeout: Optional[float]) -> None:
    """Run descriptor.action(data) on the calling thread, as a signal handler would.

    Staying on the interrupted thread keeps re-entrant locks it holds (logging
    handlers) usable by the action. The synchronous part is bounded by SIGALRM,
    a returned awaitable by asyncio.wait_for.
    """
    try:
        with _alarm(timeout):
            result = descriptor.action(descriptor.data)
    except _AlarmExpired as e:
        raise ActionTimeoutError(index, descriptor.name, timeout) from e
    except Exception as e:
        raise SaveActionError(index, descriptor.name) from e
    if inspect.isawaitable(result):
        _run_awaitable(result, index, descriptor.name, timeout)


class Lifecycle:
    """
    Process-wide shutdown coordinator.

    Example:
        lifecycle = Lifecycle()
        lifecycle.add(store.unsaved, store.save, pending_items=store.unsaved)
        lifecycle.register()

    register() installs SIGINT/SIGTERM handlers and an atexit hook and must be
    called once per process. On a signal the registry is drained in order and
    the process exits with 0, or 1 if a save action failed. On normal exit the
    first non-empty pending_items sequence is written to flush_path.
    """

    def __init__(
        self,
        registry: Optional[Sequence[SaveDescriptor]] = None,
        *,
        action_timeout: float = SHUTDOWN_ACTION_TIMEOUT,
        fail_fast: bool = SHUTDOWN_FAIL_FAST,
        flush_path: Path = UNSAVED_PLACES_PATH,
        exit_func: Callable[[int], Any] = sys.exit,
    ):
        self._registry: List[SaveDescriptor] = list(registry or [])
        self._action_timeout = action_timeout
        self._fail_fast = fail_fast
        self._flush_path = Path(flush_path)
        self._exit = exit_func
        self._state = ShutdownState.IDLE
        self._trigger: Optional[str] = None
        self._installed = False
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._previous_handlers: Dict[signal.Signals, Any] = {}
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> ShutdownState:
        return self._state

    @property
    def trigger(self) -> Optional[str]:
        """Name of the trigger that started shutdown, if any."""
        return self._trigger

    @property
    def registry(self) -> tuple:
        return tuple(self._registry)

    def add(
        self,
        data: Any,
        action: Callable[[Any], Any],
        pending_items: Optional[Sequence[Any]] = None,
        name: Optional[str] = None,
    ) -> SaveDescriptor:
        """Append a save descriptor. Registration order is drain order."""
        if self._state is not ShutdownState.IDLE:
            raise LifecycleError("cannot register save actions once shutdown has started")
        descriptor = SaveDescriptor(data=data, action=action, pending_items=pending_items, name=name)
        self._registry.append(descriptor)
        _log.debug("save_action_registered", extra={"action": descriptor.name, "index": len(self._registry) - 1})
        return descriptor

    # --- handler installation ---

    def register(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """
        Install SIGINT/SIGTERM handlers and the normal-exit hook.

        With `loop`, signals go through loop.add_signal_handler and the drain
        runs as a task on that loop; otherwise signal.signal is used and the
        drain runs inside the handler. Raises HandlerInstallError on failure
        or when called twice.
        """
        if self._installed:
            raise HandlerInstallError("shutdown handlers are already installed")
        try:
            for sig in HANDLED_SIGNALS:
                if loop is None:
                    self._previous_handlers[sig] = signal.signal(sig, self._handle_signal)
                else:
                    loop.add_signal_handler(sig, self._schedule_shutdown, sig.name)
        except (ValueError, OSError, RuntimeError, NotImplementedError) as e:
            self._restore_handlers(loop)
            raise HandlerInstallError(f"could not install signal handlers: {e}") from e
        atexit.register(self._handle_exit)
        self._loop = loop
        self._installed = True
        _log.info(
            "shutdown_handlers_installed",
            extra={"signals": ",".join(s.name for s in HANDLED_SIGNALS), "actions": len(self._registry)},
        )

    def unregister(self) -> None:
        """Restore previous signal handlers and drop the atexit hook."""
        if not self._installed:
            return
        self._restore_handlers(self._loop)
        atexit.unregister(self._handle_exit)
        self._loop = None
        self._installed = False

    def _restore_handlers(self, loop: Optional[asyncio.AbstractEventLoop]) -> None:
        """Undo whatever signal handlers this instance installed, including a partial install."""
        if loop is not None:
            for sig in HANDLED_SIGNALS:
                loop.remove_signal_handler(sig)
        else:
            for sig, previous in self._previous_handlers.items():
                signal.signal(sig, previous if previous is not None else signal.SIG_DFL)
        self._previous_handlers.clear()

    def _handle_signal(self, signum: int, frame: Any) -> None:
        name = signal.Signals(signum).name
        _log.info("signal_received", extra={"signal": name})
        self.run_shutdown(trigger=name)

    def _schedule_shutdown(self, trigger: str) -> None:
        _log.info("signal_received", extra={"signal": trigger})
        if self._task is not None:
            _log.info("shutdown_trigger_ignored", extra={"trigger": trigger, "state": self._state.name})
            return
        self._task = self._loop.create_task(self.run_shutdown_async(trigger))

    def _handle_exit(self) -> int:
        """Normal-exit path: flush unsaved items, never raise, exit code stays 0."""
        if not self._begin("exit"):
            return EXIT_OK
        self.emergency_flush()
        self._finish(EXIT_OK)
        return EXIT_OK

    # --- state machine ---

    def _begin(self, trigger: str) -> bool:
        if self._state is not ShutdownState.IDLE:
            _log.info("shutdown_trigger_ignored", extra={"trigger": trigger, "state": self._state.name})
            return False
        self._state = ShutdownState.DRAINING
        self._trigger = trigger
        _log.info("shutdown_start", extra={"trigger": trigger, "actions": len(self._registry)})
        return True

    def _finish(self, code: int) -> None:
        self._state = ShutdownState.DONE
        if code == EXIT_OK:
            _log.info("shutdown_complete", extra={"trigger": self._trigger, "exit_code": code})
        else:
            _log.error("shutdown_failed", extra={"trigger": self._trigger, "exit_code": code})

    def run_shutdown(self, trigger: str = "manual") -> Optional[int]:
        """
        Drain the registry and exit. Idempotent.

        Returns None when shutdown has already started. Otherwise calls
        exit_func with the drain's exit code (which, with sys.exit, does not return).
        """
        if not self._begin(trigger):
            return None
        code = self.drain()
        self._finish(code)
        self._exit(code)
        return code

    async def run_shutdown_async(self, trigger: str = "manual") -> Optional[int]:
        """Same contract as run_shutdown, awaiting actions on the running loop."""
        if not self._begin(trigger):
            return None
        code = await self.drain_async()
        self._finish(code)
        self._exit(code)
        return code

    # --- drain ---

    def _deadline(self) -> Optional[float]:
        return self._action_timeout if self._action_timeout and self._action_timeout > 0 else None

    def _report_failure(self, error: SaveActionError) -> None:
        _log.error(
            "save_action_failed",
            extra={"index": error.index, "action": error.action, "error": str(error.__cause__ or error)},
            exc_info=error.__cause__,
        )

    def _drain_result(self, failures: List[SaveActionError], ran: int) -> int:
        if failures and self._fail_fast and ran < len(self._registry):
            _log.warning("save_actions_skipped", extra={"skipped": len(self._registry) - ran})
        return EXIT_FAILURE if failures else EXIT_OK

    def drain(self) -> int:
        """Run every save action in registration order. Returns the exit code."""
        failures: List[SaveActionError] = []
        ran = 0
        for index, descriptor in enumerate(self._registry):
            ran += 1
            _log.info("save_action_start", extra={"index": index, "action": descriptor.name})
            try:
                _call_inline(descriptor, index, self._deadline())
            except SaveActionError as e:
                self._report_failure(e)
                failures.append(e)
                if self._fail_fast:
                    break
        return self._drain_result(failures, ran)

    async def drain_async(self) -> int:
        """Async drain: awaitables are awaited on the running loop under the deadline."""
        failures: List[SaveActionError] = []
        ran = 0
        for index, descriptor in enumerate(self._registry):
            ran += 1
            _log.info("save_action_start", extra={"index": index, "action": descriptor.name})
            try:
                await self._run_action_async(descriptor, index)
            except SaveActionError as e:
                self._report_failure(e)
                failures.append(e)
                if self._fail_fast:
                    break
        return self._drain_result(failures, ran)

    async def _run_action_async(self, descriptor: SaveDescriptor, index: int) -> None:
        try:
            result = descriptor.action(descriptor.data)
        except Exception as e:
            raise SaveActionError(index, descriptor.name) from e
        if inspect.isawaitable(result):
            await _await_with_deadline(result, index, descriptor.name, self._deadline())

    # --- emergency flush ---

    def emergency_flush(self) -> Optional[Path]:
        """Write the first non-empty pending_items sequence to flush_path. Best-effort."""
        descriptor = next((d for d in self._registry if d.has_pending()), None)
        if descriptor is None:
            return None
        items = list(descriptor.pending_items)
        _log.warning("unsaved_items_detected", extra={"action": descriptor.name, "count": len(items)})
        try:
            path = write_json(self._flush_path, items, indent=2)
        except (OSError, TypeError, ValueError) as e:
            _log.error("emergency_flush_failed", extra={"flush_path": str(self._flush_path), "error": str(e)})
            return None
        _log.info("emergency_flush_complete", extra={"flush_path": str(path), "count": len(items)})
        return path
