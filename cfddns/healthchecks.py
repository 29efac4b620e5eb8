"""Healthchecks monitor."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import requests

from cfddns.monitor import MAX_READ_LENGTH, Message, Monitor
from cfddns.pp import Emoji

DEFAULT_TIMEOUT = 10.0
_RETRY_MAX = 4

_INVALID = "The Healthchecks URL (redacted) does not look like a valid URL"
_EXAMPLE = 'A valid example is "https://hc-ping.com/01234567-0123-0123-0123-0123456789abc"'


def _request(method: str, url: str, timeout: float, **kwargs: Any) -> requests.Response:
    deadline = time.monotonic() + timeout
    last: object = "timed out"
    attempts = 0
    for attempt in range(_RETRY_MAX + 1):
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        attempts += 1
        try:
            resp = requests.request(method, url, timeout=remaining, **kwargs)
        except requests.RequestException as e:
            last = e
        else:
            if (resp.status_code < 500 and resp.status_code != 429) or attempt == _RETRY_MAX:
                return resp
            last = f"status code {resp.status_code}"
            resp.close()
        if attempt < _RETRY_MAX:
            time.sleep(max(0.0, min(0.05 * 2**attempt, deadline - time.monotonic())))
    raise requests.ConnectionError(f"giving up after {attempts} attempt(s): {last}")


@dataclass(frozen=True)
class Healthchecks(Monitor):
    """A Healthchecks access point given by its success URL."""

    base_url: str
    timeout: float = DEFAULT_TIMEOUT

    def describe(self):
        yield ("Healthchecks", "(URL redacted)")

    def _endpoint_url(self, endpoint: str) -> str:
        parts = urlsplit(self.base_url)
        path = parts.path.rstrip("/") + endpoint if endpoint else parts.path.rstrip("/")
        return urlunsplit((parts.scheme, parts.netloc, path or "/", "", ""))

    def _ping(self, ppfmt: Any, endpoint: str, message: str) -> bool:
        description = json.dumps(endpoint) if endpoint else "default (root)"
        try:
            resp = _request(
                "POST", self._endpoint_url(endpoint), self.timeout, data=message.encode("utf-8")
            )
        except requests.RequestException as e:
            ppfmt.notice(
                Emoji.ERROR,
                f"Failed to send HTTP(S) request to the {description} endpoint of Healthchecks: {e}",
            )
            return False
        with resp:
            body = resp.content[:MAX_READ_LENGTH].decode("utf-8", errors="replace").strip()
            if resp.status_code != 200 or body != "OK":
                ppfmt.notice(
                    Emoji.ERROR,
                    f"Failed to ping the {description} endpoint of Healthchecks; "
                    f"got response code: {resp.status_code} {body}",
                )
                return False
        ppfmt.info(Emoji.PING, f"Pinged the {description} endpoint of Healthchecks")
        return True

    def ping(self, ppfmt: Any, message: Message) -> bool:
        return self._ping(ppfmt, "" if message.ok else "/fail", message.format())

    def start(self, ppfmt: Any, message: str) -> bool:
        return self._ping(ppfmt, "/start", message)

    def exit(self, ppfmt: Any, message: str) -> bool:
        return self._ping(ppfmt, "/0", message)

    def log(self, ppfmt: Any, message: Message) -> bool:
        if not message.ok:
            return self._ping(ppfmt, "/fail", message.format())
        if not message.is_empty():
            return self._ping(ppfmt, "/log", message.format())
        return True


def new_healthchecks(ppfmt: Any, raw_url: str) -> Healthchecks:
    """Create a Healthchecks monitor; raise ValueError if the URL is unusable."""
    try:
        if raw_url.startswith(":"):
            raise ValueError("missing protocol scheme")
        parts = urlsplit(raw_url)
        host = parts.hostname
    except ValueError:
        ppfmt.notice(Emoji.USER_ERROR, "Failed to parse the Healthchecks URL (redacted)")
        raise ValueError("failed to parse the Healthchecks URL") from None

    if not (parts.scheme and host and not parts.query) or parts.scheme not in ("http", "https"):
        ppfmt.notice(Emoji.USER_ERROR, _INVALID)
        ppfmt.notice(Emoji.USER_ERROR, _EXAMPLE)
        raise ValueError("invalid Healthchecks URL")

    if parts.scheme == "http":
        ppfmt.notice(
            Emoji.USER_WARNING,
            "The Healthchecks URL (redacted) uses HTTP; please consider using HTTPS",
        )
    return Healthchecks(raw_url, DEFAULT_TIMEOUT)