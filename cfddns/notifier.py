"""Push notifications: messages, the notifier interface and composition."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from itertools import chain
from typing import Any


class Message(tuple):
    """A sequence of message fragments sent as one notification."""

    def __new__(cls, lines: Iterable[str] = ()) -> Message:
        return super().__new__(cls, lines)

    def __repr__(self) -> str:
        return f"Message({tuple(self)!r})"

    def format(self) -> str:
        """Join the fragments with spaces."""
        return " ".join(self)

    def is_empty(self) -> bool:
        """Tell whether the message has no fragments."""
        return len(self) == 0


def merge_messages(*args: Message) -> Message:
    """Concatenate messages in order."""
    return Message(chain.from_iterable(args))


class Notifier(ABC):
    """An abstract push notification service."""

    @abstractmethod
    def describe(self) -> Iterator[tuple[str, str]]:
        """Yield pairs of service name and parameters."""

    @abstractmethod
    def send(self, ppfmt: Any, message: Message) -> bool:
        """Send out a message; return whether it succeeded."""


class Composed(Notifier):
    """Several notifiers acting as one."""

    def __init__(self, *args: Notifier | None) -> None:
        notifiers: list[Notifier] = []
        for n in args:
            if n is None:
                continue
            if isinstance(n, Composed):
                notifiers.extend(n)
            else:
                notifiers.append(n)
        self._notifiers = tuple(notifiers)

    def __iter__(self) -> Iterator[Notifier]:
        return iter(self._notifiers)

    def __len__(self) -> int:
        return len(self._notifiers)

    def describe(self) -> Iterator[tuple[str, str]]:
        for n in self._notifiers:
            yield from n.describe()

    def send(self, ppfmt: Any, message: Message) -> bool:
        ok = True
        for n in self._notifiers:
            ok = ok and n.send(ppfmt, message)
        return ok