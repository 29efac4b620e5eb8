"""Uptime Kuma monitor."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

import requests

from cfddns.monitor import MAX_READ_LENGTH, BasicMonitor, Message
from cfddns.pp import Emoji

DEFAULT_TIMEOUT = 10.0
_RETRY_MAX = 4

_INVALID = "The Uptime Kuma URL (redacted) does not look like a valid URL"
_EXPECTED_QUERY = {"status": ["up"], "msg": ["OK"], "ping": [""]}


def _request(method: str, url: str, timeout: float) -> requests.Response:
    deadline = time.monotonic() + timeout
    last: object = "timed out"
    attempts = 0
    for attempt in range(_RETRY_MAX + 1):
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        attempts += 1
        try:
            resp = requests.request(method, url, timeout=remaining)
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
class UptimeKuma(BasicMonitor):
    """Basic support of Uptime Kuma push monitors.

    Success and failure become status=up and status=down; success messages
    are replaced by "OK".
    """

    base_url: str
    timeout: float = DEFAULT_TIMEOUT

    def describe(self):
        yield ("Uptime Kuma", "(URL redacted)")

    def _ping(self, ppfmt: Any, status: str, msg: str) -> bool:
        query = urlencode(sorted({"status": status, "msg": msg, "ping": ""}.items()))
        parts = urlsplit(self.base_url)
        url = urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))
        try:
            resp = _request("GET", url, self.timeout)
        except requests.RequestException as e:
            ppfmt.notice(Emoji.ERROR, f"Failed to send HTTP(S) request to Uptime Kuma: {e}")
            return False
        with resp:
            try:
                parsed = json.loads(resp.content[:MAX_READ_LENGTH])
                if not isinstance(parsed, dict):
                    raise ValueError(f"unexpected JSON value {parsed!r}")
            except ValueError as e:
                ppfmt.notice(Emoji.ERROR, f"Failed to parse the response from Uptime Kuma: {e}")
                return False
        if parsed.get("ok") is not True:
            ppfmt.notice(Emoji.ERROR, f"Failed to ping Uptime Kuma: {parsed.get('msg', '')}")
            return False
        ppfmt.info(Emoji.PING, "Pinged Uptime Kuma")
        return True

    def ping(self, ppfmt: Any, message: Message) -> bool:
        if message.ok:
            # Uptime Kuma keeps the first success message, so a fixed text avoids stale ones.
            return self._ping(ppfmt, "up", "OK")
        # An empty message would leave the previous (possibly successful) text in place.
        return self._ping(ppfmt, "down", message.format() or "Failing")


def new_uptime_kuma(ppfmt: Any, raw_url: str) -> UptimeKuma:
    """Create an Uptime Kuma monitor; raise ValueError if the URL is unusable."""
    try:
        if raw_url.startswith(":"):
            raise ValueError("missing protocol scheme")
        parts = urlsplit(raw_url)
        host = parts.hostname
    except ValueError:
        ppfmt.notice(Emoji.USER_ERROR, "Failed to parse the Uptime Kuma URL (redacted)")
        raise ValueError("failed to parse the Uptime Kuma URL") from None

    if not (parts.scheme and host) or parts.scheme not in ("http", "https"):
        ppfmt.notice(Emoji.USER_ERROR, _INVALID)
        raise ValueError("invalid Uptime Kuma URL")

    if parts.scheme == "http":
        ppfmt.notice(
            Emoji.USER_WARNING,
            "The Uptime Kuma URL (redacted) uses HTTP; please consider using HTTPS",
        )

    if parts.query:
        if ";" in parts.query:
            ppfmt.notice(Emoji.USER_ERROR, _INVALID)
            raise ValueError("invalid Uptime Kuma URL query")
        for key, values in parse_qs(parts.query, keep_blank_values=True).items():
            if _EXPECTED_QUERY.get(key) != values:
                ppfmt.notice(
                    Emoji.USER_ERROR,
                    f"The Uptime Kuma URL (redacted) contains an unexpected query {key}=... "
                    "and it will be ignored",
                )

    base = urlunsplit((parts.scheme, parts.netloc, parts.path, "", parts.fragment))
    return UptimeKuma(base, DEFAULT_TIMEOUT)