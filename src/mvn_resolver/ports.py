"""Capabilities the resolver consumes: a transport and a POM parser."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from mvn_resolver.models import Project


@runtime_checkable
class UrlFetcher(Protocol):
    """Fetches repository files.

    Implementations raise `ArtifactNotFoundError` for a missing resource
    (HTTP 404) and `ClientError` for any other failure.
    """

    def fetch(self, url: str) -> str: ...

    def fetch_bytes(self, url: str) -> bytes: ...


@runtime_checkable
class PomParser(Protocol):
    """Turns POM text into a raw, non-normalized `Project`.

    Ill-formed input raises `ClientError`.
    """

    def parse(self, text: str) -> Project: ...
