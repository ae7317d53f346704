r"""Client for the WordPress.org plugin and theme information APIs.

The resolver asks this client where a plugin can be downloaded from and
whether a theme is published. Only the ``plugin_information`` and
``theme_information`` actions of the ``info/1.2`` endpoints are used.

Example
-------
>>> from playground_blueprints.wporg import WordPressOrgClient
>>> client = WordPressOrgClient(timeout=5)  # doctest: +SKIP
>>> info = client.plugin_information("akismet")  # doctest: +SKIP
>>> info["download_link"]  # doctest: +SKIP
'https://downloads.wordpress.org/plugin/akismet.5.3.zip'
"""

from __future__ import annotations

import json
import typing as typ
from http import HTTPStatus

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

DEFAULT_API_BASE = "https://api.wordpress.org"
DEFAULT_TIMEOUT = 10.0


class WordPressOrgError(RuntimeError):
    """Raised when the WordPress.org API returns an unexpected response."""


def _build_session() -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=3,
        read=3,
        connect=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class WordPressOrgClient:
    """Thin wrapper around the WordPress.org ``info/1.2`` endpoints."""

    default_api_base = DEFAULT_API_BASE

    def __init__(
        self,
        *,
        api_base: str = DEFAULT_API_BASE,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialise the client with an optional transport.

        Parameters
        ----------
        api_base : str, optional
            Base URL of the API; override to point at a mirror. Defaults to
            ``DEFAULT_API_BASE``.
        session : requests.Session, optional
            Preconfigured session to reuse connections. Defaults to a new
            session with a retrying adapter mounted.
        timeout : float, optional
            Per-request timeout in seconds. Defaults to ``DEFAULT_TIMEOUT``.
        """
        self._api_base = api_base.rstrip("/") or DEFAULT_API_BASE
        self._session = session or _build_session()
        self.timeout = timeout
        self._headers = {
            "Accept": "application/json",
            "User-Agent": "playground-blueprints/0.1",
        }

    def plugin_information(self, slug: str) -> dict[str, typ.Any] | None:
        """Return the plugin information payload or ``None`` when unpublished."""
        return self._information("plugins", "plugin_information", slug)

    def theme_information(self, slug: str) -> dict[str, typ.Any] | None:
        """Return the theme information payload or ``None`` when unpublished."""
        return self._information("themes", "theme_information", slug)

    def _information(
        self, kind: str, action: str, slug: str
    ) -> dict[str, typ.Any] | None:
        normalized = slug.strip()
        if not normalized:
            msg = "Slug cannot be empty"
            raise ValueError(msg)

        url = f"{self._api_base}/{kind}/info/1.2/"
        params = {"action": action, "request[slug]": normalized}
        try:
            response = self._session.get(
                url, params=params, headers=self._headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            msg = f"Failed to reach WordPress.org {kind} API for '{normalized}': {exc}"
            raise WordPressOrgError(msg) from exc

        if response.status_code == HTTPStatus.NOT_FOUND:
            return None
        if response.status_code >= HTTPStatus.BAD_REQUEST:
            snippet = response.text[:200]
            msg = (
                f"WordPress.org {action} lookup for '{normalized}' failed with "
                f"status {response.status_code}: {snippet}"
            )
            raise WordPressOrgError(msg)

        try:
            payload = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            msg = f"WordPress.org response for '{normalized}' was not valid JSON"
            raise WordPressOrgError(msg) from exc

        if not isinstance(payload, dict) or payload.get("error"):
            return None
        return payload


__all__ = [
    "DEFAULT_API_BASE",
    "DEFAULT_TIMEOUT",
    "WordPressOrgClient",
    "WordPressOrgError",
]
