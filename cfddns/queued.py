"""A printer that queues printing operations until it is flushed."""

from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import Any

from cfddns.pp import Emoji, Verbosity


class QueuedPrinter:
    """Queues printing calls to an upstream printer; other calls run at once.

    Printers derived through :meth:`indent` share the same queue, so
    :meth:`flush` replays every queued call in the order it was made.
    """

    def __init__(self, upstream: Any) -> None:
        self._upstream = upstream
        self._queue: list[Callable[[], None]] = []

    def is_showing(self, verbosity: Verbosity) -> bool:
        """Ask the upstream printer whether the level is shown."""
        return self._upstream.is_showing(verbosity)

    def indent(self) -> QueuedPrinter:
        """Return a queued printer over an indented upstream, sharing the queue."""
        child = QueuedPrinter(self._upstream.indent())
        child._queue = self._queue
        return child

    def blank_line_if_verbose(self) -> None:
        """Queue a blank line."""
        upstream = self._upstream
        self._queue.append(upstream.blank_line_if_verbose)

    def info(self, emoji: Emoji | str, message: str) -> None:
        """Queue an info message."""
        upstream = self._upstream
        self._queue.append(lambda: upstream.info(emoji, message))

    def notice(self, emoji: Emoji | str, message: str) -> None:
        """Queue a notice."""
        upstream = self._upstream
        self._queue.append(lambda: upstream.notice(emoji, message))

    def suppress(self, message_id: Hashable) -> None:
        """Queue a suppression of a message identifier."""
        upstream = self._upstream
        self._queue.append(lambda: upstream.suppress(message_id))

    def info_once(self, message_id: Hashable, emoji: Emoji | str, message: str) -> None:
        """Queue a once-only info message."""
        upstream = self._upstream
        self._queue.append(lambda: upstream.info_once(message_id, emoji, message))

    def notice_once(self, message_id: Hashable, emoji: Emoji | str, message: str) -> None:
        """Queue a once-only notice."""
        upstream = self._upstream
        self._queue.append(lambda: upstream.notice_once(message_id, emoji, message))

    def flush(self) -> None:
        """Run all queued calls in order and empty the queue."""
        pending = list(self._queue)
        self._queue.clear()
        for call in pending:
            call()