"""Pytest configuration and fixtures for mvn-resolver tests."""
from __future__ import annotations

import io
import zipfile
from collections import Counter

import pytest

from mvn_resolver.exceptions import ArtifactNotFoundError, ClientError
from mvn_resolver.models import Repository
from mvn_resolver.resolver import Resolver

REPO_A = "https://repo-a.example/maven2"
REPO_B = "https://repo-b.example/maven2"


class FakeUrlFetcher:
    """In-memory repository contents keyed by URL; anything else is a 404."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.errors: dict[str, Exception] = {}
        self.calls: Counter[str] = Counter()

    def add(self, url: str, content: str | bytes) -> None:
        self.files[url] = content.encode("utf-8") if isinstance(content, str) else content

    def fail(self, url: str, exc: Exception) -> None:
        self.errors[url] = exc

    def _lookup(self, url: str) -> bytes:
        self.calls[url] += 1
        if url in self.errors:
            raise self.errors[url]
        if url not in self.files:
            raise ArtifactNotFoundError.file_not_found(url)
        return self.files[url]

    def fetch(self, url: str) -> str:
        return self._lookup(url).decode("utf-8")

    def fetch_bytes(self, url: str) -> bytes:
        return self._lookup(url)

    def total_calls(self) -> int:
        return sum(self.calls.values())


def artifact_url(base: str, group_id: str, artifact_id: str, version: str, ext: str) -> str:
    return f"{base}/{group_id.replace('.', '/')}/{artifact_id}/{version}/{artifact_id}-{version}.{ext}"


def make_pom(
    artifact_id: str,
    version: str | None = "1.0",
    *,
    group_id: str | None = "com.example",
    parent: tuple[str, str, str] | None = None,
    dependencies: list[tuple] = (),
    managed: list[tuple] = (),
    properties: dict[str, str] | None = None,
    packaging: str | None = None,
) -> str:
    """Render a POM. Dependency tuples are (groupId, artifactId, version[, scope[, type]])."""

    def coords(g: str | None, a: str, v: str | None) -> str:
        out = ""
        if g is not None:
            out += f"<groupId>{g}</groupId>"
        out += f"<artifactId>{a}</artifactId>"
        if v is not None:
            out += f"<version>{v}</version>"
        return out

    def deps(entries: list[tuple]) -> str:
        out = ""
        for entry in entries:
            g, a, v, *rest = entry
            scope = f"<scope>{rest[0]}</scope>" if rest and rest[0] else ""
            typ = f"<type>{rest[1]}</type>" if len(rest) > 1 else ""
            out += f"<dependency>{coords(g, a, v)}{scope}{typ}</dependency>"
        return out

    body = "<modelVersion>4.0.0</modelVersion>"
    if parent is not None:
        body += f"<parent>{coords(*parent)}</parent>"
    body += coords(group_id, artifact_id, version)
    if packaging:
        body += f"<packaging>{packaging}</packaging>"
    if properties:
        body += "<properties>" + "".join(f"<{k}>{v}</{k}>" for k, v in properties.items()) + "</properties>"
    if managed:
        body += f"<dependencyManagement><dependencies>{deps(managed)}</dependencies></dependencyManagement>"
    if dependencies:
        body += f"<dependencies>{deps(dependencies)}</dependencies>"
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<project xmlns="http://maven.apache.org/POM/4.0.0">{body}</project>\n'
    )


def make_aar(classes_jar: bytes | None) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("AndroidManifest.xml", "<manifest/>")
        if classes_jar is not None:
            zf.writestr("classes.jar", classes_jar)
    return buf.getvalue()


class Repo:
    """Helper publishing POMs and binaries into a `FakeUrlFetcher` under one base URL."""

    def __init__(self, fetcher: FakeUrlFetcher, base: str) -> None:
        self.fetcher = fetcher
        self.base = base

    def pom(self, artifact_id: str, version: str = "1.0", group_id: str = "com.example", **kwargs) -> str:
        self.fetcher.add(
            artifact_url(self.base, group_id, artifact_id, version, "pom"),
            make_pom(artifact_id, version, group_id=group_id, **kwargs),
        )
        return artifact_url(self.base, group_id, artifact_id, version, "pom")

    def jar(self, artifact_id: str, version: str = "1.0", group_id: str = "com.example", data: bytes | None = None) -> str:
        url = artifact_url(self.base, group_id, artifact_id, version, "jar")
        self.fetcher.add(url, data if data is not None else f"jar:{artifact_id}:{version}".encode())
        return url

    def aar(self, artifact_id: str, version: str = "1.0", group_id: str = "com.example", classes: bytes | None = b"classes") -> str:
        url = artifact_url(self.base, group_id, artifact_id, version, "aar")
        self.fetcher.add(url, make_aar(classes))
        return url


@pytest.fixture
def fetcher() -> FakeUrlFetcher:
    return FakeUrlFetcher()


@pytest.fixture
def repo_a(fetcher: FakeUrlFetcher) -> Repo:
    return Repo(fetcher, REPO_A)


@pytest.fixture
def repo_b(fetcher: FakeUrlFetcher) -> Repo:
    return Repo(fetcher, REPO_B)


@pytest.fixture
def resolver(fetcher: FakeUrlFetcher) -> Resolver:
    return Resolver([Repository(base_url=REPO_A), Repository(base_url=REPO_B)], url_fetcher=fetcher)


@pytest.fixture
def client_error() -> ClientError:
    return ClientError("HTTP 500")
