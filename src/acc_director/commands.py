"""Outbound camera-control commands and the sinks that deliver them.

The director never talks to the broadcast client directly: it submits
commands to a :class:`CommandSink`.  :class:`QueuedCommandSink` decouples
delivery from tick processing through a bounded buffer that drops the
oldest pending command when the consumer falls behind, so submitting never
blocks.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from types import TracebackType
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Deque,
    Mapping,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .director.settings import DirectorSettings

__all__ = [
    "CallbackSink",
    "Command",
    "CommandSink",
    "DEFAULT_COMMAND_QUEUE_SIZE",
    "LoggingSink",
    "QueuedCommandSink",
    "RequestHudPage",
    "SetCamera",
    "SetFocus",
    "command_to_mapping",
]


logger = logging.getLogger(__name__)


DEFAULT_COMMAND_QUEUE_SIZE = 64


@dataclass(frozen=True, slots=True)
class SetFocus:
    """Switch the broadcast feed to ``car_index``; receivers treat repeats as no-ops."""

    car_index: int


@dataclass(frozen=True, slots=True)
class SetCamera:
    camera_set: str
    camera_name: str


@dataclass(frozen=True, slots=True)
class RequestHudPage:
    page: str


Command = Union[SetFocus, SetCamera, RequestHudPage]


def command_to_mapping(command: Command) -> Mapping[str, Any]:
    if isinstance(command, SetFocus):
        return {"command": "set_focus", "car_index": command.car_index}
    if isinstance(command, SetCamera):
        return {
            "command": "set_camera",
            "camera_set": command.camera_set,
            "camera_name": command.camera_name,
        }
    if isinstance(command, RequestHudPage):
        return {"command": "request_hud_page", "page": command.page}
    raise TypeError(f"Unsupported command {command!r}")


@runtime_checkable
class CommandSink(Protocol):
    """Anything able to accept camera-control commands without blocking."""

    def submit(self, command: Command) -> None:
        ...


class CallbackSink:
    """Deliver commands synchronously to ``callback``."""

    def __init__(self, callback: Callable[[Command], None]) -> None:
        self._callback = callback

    def submit(self, command: Command) -> None:
        self._callback(command)


class LoggingSink:
    """Record commands on a logger; useful for dry runs."""

    def __init__(self, target: Optional[logging.Logger] = None) -> None:
        self._logger = target or logger

    def submit(self, command: Command) -> None:
        payload = dict(command_to_mapping(command))
        self._logger.info(
            "Camera command %s",
            payload["command"],
            extra={"event": "commands.submit", "context": payload},
        )


class QueuedCommandSink:
    """Bounded, drop-oldest command buffer drained by a daemon thread.

    ``transport`` is invoked on the worker thread for each command.  Errors
    raised by the transport are logged and counted under ``failed``; they
    never reach the submitting director.
    """

    def __init__(
        self,
        transport: Callable[[Command], None],
        *,
        max_size: int = DEFAULT_COMMAND_QUEUE_SIZE,
        name: str = "acc-director-commands",
    ) -> None:
        if max_size <= 0:
            raise ValueError("QueuedCommandSink requires a positive max_size")
        self._transport = transport
        self._pending: Deque[Command] = deque(maxlen=max_size)
        self._condition = threading.Condition()
        self._name = name
        self._thread: Optional[threading.Thread] = None
        self._closing = False
        self._in_flight = False
        self._statistics = {"submitted": 0, "delivered": 0, "dropped": 0, "failed": 0}

    @classmethod
    def from_settings(
        cls,
        transport: Callable[[Command], None],
        settings: "DirectorSettings",
        *,
        name: str = "acc-director-commands",
    ) -> "QueuedCommandSink":
        """Build a sink whose buffer holds ``settings.command_queue_size`` commands."""

        return cls(transport, max_size=settings.command_queue_size, name=name)

    # ------------------------------------------------------------------
    # Context management helpers
    # ------------------------------------------------------------------
    def __enter__(self) -> "QueuedCommandSink":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def max_size(self) -> int:
        return self._pending.maxlen or 0

    @property
    def statistics(self) -> dict[str, int]:
        with self._condition:
            return dict(self._statistics)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._condition:
            if self._thread is not None and self._thread.is_alive():
                return
            self._closing = False
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._thread.start()

    def submit(self, command: Command) -> None:
        with self._condition:
            if self._closing:
                logger.debug(
                    "Dropping command submitted after close",
                    extra={"event": "commands.closed", "context": dict(command_to_mapping(command))},
                )
                self._statistics["dropped"] += 1
                return
            if len(self._pending) == self._pending.maxlen:
                evicted = self._pending[0]
                self._statistics["dropped"] += 1
                logger.warning(
                    "Command queue full, dropping oldest command",
                    extra={
                        "event": "commands.dropped",
                        "context": dict(command_to_mapping(evicted)),
                    },
                )
            self._pending.append(command)
            self._statistics["submitted"] += 1
            self._condition.notify_all()

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until every pending command was handed to the transport.

        Returns ``False`` on timeout, or straight away when commands are
        pending but no worker is running to deliver them.
        """

        with self._condition:
            idle = not self._pending and not self._in_flight
            if idle or not self.running:
                return idle
            return self._condition.wait_for(
                lambda: not self._pending and not self._in_flight, timeout
            )

    def close(self, timeout: float | None = 1.0) -> None:
        with self._condition:
            self._closing = True
            self._condition.notify_all()
            thread = self._thread
        if thread is None:
            return
        thread.join(timeout)
        if thread.is_alive():
            logger.warning(
                "Command worker still running after close",
                extra={"event": "commands.close_timeout", "context": {"timeout": timeout}},
            )
            return
        with self._condition:
            if self._thread is thread:
                self._thread = None

    # ------------------------------------------------------------------
    # Worker
    # ------------------------------------------------------------------
    def _run(self) -> None:
        while True:
            with self._condition:
                self._condition.wait_for(lambda: self._pending or self._closing)
                if not self._pending:
                    return
                command = self._pending.popleft()
                self._in_flight = True
            try:
                self._transport(command)
            except Exception:
                logger.exception(
                    "Command transport failed",
                    extra={
                        "event": "commands.failed",
                        "context": dict(command_to_mapping(command)),
                    },
                )
                outcome = "failed"
            else:
                outcome = "delivered"
            with self._condition:
                self._statistics[outcome] += 1
                self._in_flight = False
                self._condition.notify_all()
