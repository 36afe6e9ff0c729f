"""Diagnostics: structured, leveled, templated events and their listeners.

Events carry a message template with ``{0}``-style positional placeholders and
the positional arguments (typically an entity id and scenario):

    events.warn("Unknown field; id={0} scenario={1}", 55, "base")

Public API:
    Severity               — DEBUG, INFO, WARN, ERROR, FATAL
    Event                  — frozen dataclass: severity, template, args, message
    EventListener          — Protocol any diagnostics sink must satisfy
    BaseEventListener      — helper base: debug/info/warn/error/fatal → event()
    LogEventListener       — forwards events to a stdlib logging.Logger
    JsonEventListener      — writes one JSON object per event to a text stream
    InMemoryEventListener  — collects events in a list (tests, embedding)
    TeeEventListener       — fans events out to several listeners

Failure isolation in TeeEventListener: the first listener added is the
primary. A primary failure propagates; a failure in any other listener is
logged and skipped so the remaining listeners still receive the event.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, TextIO, runtime_checkable

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    FATAL = "FATAL"


_LOG_LEVELS: dict[Severity, int] = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}


@dataclass(frozen=True)
class Event:
    severity: Severity
    template: str
    args: tuple[Any, ...] = ()

    @property
    def message(self) -> str:
        return self.template.format(*self.args)


# ─── Protocol ─────────────────────────────────────────────────────────────────


@runtime_checkable
class EventListener(Protocol):
    """Any diagnostics sink must implement this.

    Structural subtyping: implementations need not inherit from any base class.
    """

    def event(self, severity: Severity, template: str, *args: Any) -> None:
        """Receive one event."""
        ...

    def debug(self, template: str, *args: Any) -> None: ...

    def info(self, template: str, *args: Any) -> None: ...

    def warn(self, template: str, *args: Any) -> None: ...

    def error(self, template: str, *args: Any) -> None: ...

    def fatal(self, template: str, *args: Any) -> None: ...

    def close(self) -> None:
        """Release resources once generation ends."""
        ...


# ─── Listeners ────────────────────────────────────────────────────────────────


class BaseEventListener:
    """Routes the leveled helpers to event(); subclasses implement event()."""

    def event(self, severity: Severity, template: str, *args: Any) -> None:
        raise NotImplementedError

    def debug(self, template: str, *args: Any) -> None:
        self.event(Severity.DEBUG, template, *args)

    def info(self, template: str, *args: Any) -> None:
        self.event(Severity.INFO, template, *args)

    def warn(self, template: str, *args: Any) -> None:
        self.event(Severity.WARN, template, *args)

    def error(self, template: str, *args: Any) -> None:
        self.event(Severity.ERROR, template, *args)

    def fatal(self, template: str, *args: Any) -> None:
        self.event(Severity.FATAL, template, *args)

    def close(self) -> None:
        pass

    def __enter__(self) -> BaseEventListener:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class LogEventListener(BaseEventListener):
    """Human-readable destination: forwards events to a logging.Logger."""

    def __init__(self, target: logging.Logger | None = None) -> None:
        self._logger = target or logging.getLogger("orchestra2md")

    def event(self, severity: Severity, template: str, *args: Any) -> None:
        self._logger.log(_LOG_LEVELS[severity], "%s", Event(severity, template, args).message)


class JsonEventListener(BaseEventListener):
    """Machine-readable destination: one JSON object per line.

    Keys: severity, message, template, args. Arguments that are not JSON
    types are written as strings. The stream is closed on close() only when
    owns_stream is True.
    """

    def __init__(self, stream: TextIO, *, owns_stream: bool = False) -> None:
        self._stream = stream
        self._owns_stream = owns_stream

    def event(self, severity: Severity, template: str, *args: Any) -> None:
        record = {
            "severity": severity.value,
            "message": Event(severity, template, args).message,
            "template": template,
            "args": list(args),
        }
        self._stream.write(json.dumps(record, default=str) + "\n")

    def close(self) -> None:
        self._stream.flush()
        if self._owns_stream:
            self._stream.close()


class InMemoryEventListener(BaseEventListener):
    """Collects events in call order. Satisfies EventListener structurally."""

    def __init__(self) -> None:
        self.events: list[Event] = []
        self.closed = False

    def event(self, severity: Severity, template: str, *args: Any) -> None:
        self.events.append(Event(severity, template, args))

    def close(self) -> None:
        self.closed = True

    def messages(self, severity: Severity | None = None) -> list[str]:
        """Formatted messages, optionally filtered by severity."""
        return [
            e.message for e in self.events if severity is None or e.severity == severity
        ]


class TeeEventListener(BaseEventListener):
    """Fans each event out to every added listener, synchronously, in order."""

    def __init__(self, *listeners: EventListener) -> None:
        self._listeners: list[EventListener] = list(listeners)

    def add_event_listener(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    @property
    def listeners(self) -> list[EventListener]:
        return list(self._listeners)

    def event(self, severity: Severity, template: str, *args: Any) -> None:
        for index, listener in enumerate(self._listeners):
            if index == 0:
                listener.event(severity, template, *args)
                continue
            try:
                listener.event(severity, template, *args)
            except Exception:
                logger.exception(
                    "Event listener %r failed; event skipped for this destination",
                    listener,
                )

    def close(self) -> None:
        """Close secondary listeners first, then the primary."""
        for listener in self._listeners[1:]:
            try:
                listener.close()
            except Exception:
                logger.exception("Event listener %r failed to close", listener)
        if self._listeners:
            self._listeners[0].close()
