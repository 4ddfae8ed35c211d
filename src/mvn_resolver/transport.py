"""HTTP transport backed by requests."""

from __future__ import annotations

import logging
from typing import Any

import requests

from mvn_resolver.exceptions import ArtifactNotFoundError, ClientError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
USER_AGENT = "mvn-resolver"


class HttpUrlFetcher:
    """`UrlFetcher` that performs plain GET requests.

    A 404 maps to `ArtifactNotFoundError`; any other non-2xx status or a
    connection problem maps to `ClientError`.
    """

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT, session: requests.Session | None = None):
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers["User-Agent"] = USER_AGENT

    def __enter__(self) -> HttpUrlFetcher:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def _get(self, url: str) -> requests.Response:
        logger.debug("GET %s", url)
        try:
            res = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ClientError(f"Request to {url} failed: {exc}") from exc

        if res.status_code == 404:
            raise ArtifactNotFoundError.file_not_found(url)
        if not 200 <= res.status_code < 300:
            raise ClientError(f"Unexpected HTTP {res.status_code} for {url}")
        return res

    def fetch(self, url: str) -> str:
        res = self._get(url)
        try:
            return res.content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ClientError(f"Response from {url} is not valid UTF-8") from exc

    def fetch_bytes(self, url: str) -> bytes:
        return self._get(url).content
