"""Browser location primitives.

The authenticator never touches a real page directly. It reads and rewrites
the current location and navigates through a ``BrowserContext``, which lets
the same flow run behind a web page, a CLI or a test.
"""

from __future__ import annotations

import logging
import webbrowser
from typing import Protocol
from urllib.parse import urlsplit, urlunsplit

logger = logging.getLogger(__name__)

_LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1"})


class BrowserContext(Protocol):
    """Access to the page hosting the flow."""

    @property
    def location(self) -> str:
        """The full URL of the current page."""
        ...

    def assign(self, url: str) -> None:
        """Navigate away to ``url``."""
        ...

    def replace_location(self, url: str) -> None:
        """Rewrite the visible URL without navigating."""
        ...


class StaticBrowserContext:
    """In-memory browser context.

    Keeps the current location as a string and records every navigation.
    Suitable for server-side callers that receive the callback URL from a
    request handler.
    """

    def __init__(self, location: str):
        self._location = location
        self.navigations: list[str] = []

    @property
    def location(self) -> str:
        return self._location

    def assign(self, url: str) -> None:
        self.navigations.append(url)

    def replace_location(self, url: str) -> None:
        self._location = url


class SystemBrowserContext:
    """Browser context backed by the user's default web browser.

    The authorization URL is opened with :mod:`webbrowser`. Once the provider
    redirects back, the caller passes the callback URL to
    :meth:`receive_callback` before completing the flow.
    """

    def __init__(self, redirect_uri: str):
        self._location = redirect_uri

    @property
    def location(self) -> str:
        return self._location

    def assign(self, url: str) -> None:
        logger.info("Opening authorization URL in the system browser")
        if not webbrowser.open(url):
            logger.warning(f"Could not open a browser, visit this URL: {url}")

    def replace_location(self, url: str) -> None:
        self._location = url

    def receive_callback(self, url: str) -> None:
        self._location = url


def is_insecure_location(url: str) -> bool:
    """Check if a page URL is unsafe for exchanging credentials.

    HTTPS is secure. Plain HTTP is tolerated only on loopback hosts, where
    nothing crosses the network.
    """
    parts = urlsplit(url)
    return parts.scheme != "https" and parts.hostname not in _LOOPBACK_HOSTS


def redirect_uri_for(url: str) -> str:
    """Origin plus path of a page URL, used as the OAuth redirect_uri."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
