"""Dead man's switches: messages, monitor interfaces and composition."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

# Maximum number of bytes read from an HTTP response.
MAX_READ_LENGTH = 102400


@dataclass(frozen=True)
class Message:
    """Lines of text together with a success/failure status."""

    ok: bool = True
    lines: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def single(cls, ok: bool, line: str) -> Message:
        """Create a message holding one line."""
        return cls(ok, (line,))

    def format(self) -> str:
        """Join the lines into one string."""
        return "\n".join(self.lines)

    def is_empty(self) -> bool:
        """Tell whether the message has no lines."""
        return not self.lines


def merge_messages(*args: Message) -> Message:
    """Merge messages, keeping only the lines of the highest severity."""
    ok = all(msg.ok for msg in args)
    lines = tuple(line for msg in args if msg.ok == ok for line in msg.lines)
    return Message(ok, lines)


class BasicMonitor(ABC):
    """A dead man's switch that notifies the user when updating fails."""

    @abstractmethod
    def describe(self) -> Iterator[tuple[str, str]]:
        """Yield pairs of service name and parameters."""

    @abstractmethod
    def ping(self, ppfmt: Any, message: Message) -> bool:
        """Report success (preventing notifications) or failure (notifying)."""


class Monitor(BasicMonitor):
    """A monitor with start, exit and log signals."""

    @abstractmethod
    def start(self, ppfmt: Any, message: str) -> bool:
        """Send the start signal."""

    @abstractmethod
    def exit(self, ppfmt: Any, message: str) -> bool:
        """Send the successful exit signal."""

    @abstractmethod
    def log(self, ppfmt: Any, message: Message) -> bool:
        """Add information; a failing message notifies the user at once."""


class Composed(Monitor):
    """Several monitors acting as one."""

    def __init__(self, *args: BasicMonitor | None) -> None:
        monitors: list[BasicMonitor] = []
        for m in args:
            if m is None:
                continue
            if isinstance(m, Composed):
                monitors.extend(m)
            else:
                monitors.append(m)
        self._monitors = tuple(monitors)

    def __iter__(self) -> Iterator[BasicMonitor]:
        return iter(self._monitors)

    def __len__(self) -> int:
        return len(self._monitors)

    def _extended(self) -> Iterable[Monitor]:
        return (m for m in self._monitors if isinstance(m, Monitor))

    def describe(self) -> Iterator[tuple[str, str]]:
        for m in self._monitors:
            yield from m.describe()

    def ping(self, ppfmt: Any, message: Message) -> bool:
        ok = True
        for m in self._monitors:
            ok = ok and m.ping(ppfmt, message)
        return ok

    def start(self, ppfmt: Any, message: str) -> bool:
        ok = True
        for m in self._extended():
            ok = ok and m.start(ppfmt, message)
        return ok

    def exit(self, ppfmt: Any, message: str) -> bool:
        ok = True
        for m in self._extended():
            ok = ok and m.exit(ppfmt, message)
        return ok

    def log(self, ppfmt: Any, message: Message) -> bool:
        ok = True
        for m in self._monitors:
            if isinstance(m, Monitor):
                ok = ok and m.log(ppfmt, message)
            elif not message.ok:
                ok = ok and m.ping(ppfmt, message)
        return ok