"""Resolver configuration module.

Configuration is read from environment variables; the CLI overrides
individual values with its flags.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from mvn_resolver.exceptions import ClientError
from mvn_resolver.models import GOOGLE_MAVEN_URL, MAVEN_CENTRAL_URL, POM, Artifact, Repository
from mvn_resolver.transport import DEFAULT_TIMEOUT


DEFAULT_REPOSITORIES = [GOOGLE_MAVEN_URL, MAVEN_CENTRAL_URL]


def _split_list(value: str | None) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


@dataclass
class ResolverConfig:
    """Resolver configuration container.

    Attributes:
        repositories: Repository base URLs, in lookup order.
        target_dir: Directory the jars are extracted under.
        roots: Root coordinates as `groupId:artifactId:version` strings.
        timeout: HTTP timeout in seconds.
    """

    repositories: list[str] = field(default_factory=lambda: list(DEFAULT_REPOSITORIES))
    target_dir: Path = Path("classes")
    roots: list[str] = field(default_factory=list)
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> "ResolverConfig":
        """Create configuration from environment variables.

        Environment variables:
            MVN_RESOLVER_REPOSITORIES: Comma-separated base URLs
                (default: Google Maven, then Maven Central)
            MVN_RESOLVER_TARGET_DIR: Extraction directory (default: "classes")
            MVN_RESOLVER_ROOTS: Comma-separated root coordinates
            MVN_RESOLVER_TIMEOUT: HTTP timeout in seconds (default: 30)
        """
        timeout_raw = os.getenv("MVN_RESOLVER_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError:
            raise ValueError(f"MVN_RESOLVER_TIMEOUT must be a number, got {timeout_raw!r}") from None

        return cls(
            repositories=_split_list(os.getenv("MVN_RESOLVER_REPOSITORIES")) or list(DEFAULT_REPOSITORIES),
            target_dir=Path(os.getenv("MVN_RESOLVER_TARGET_DIR", "classes")),
            roots=_split_list(os.getenv("MVN_RESOLVER_ROOTS")),
            timeout=timeout,
        )

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ValueError: If required configuration is missing or malformed.
        """
        if not self.repositories:
            raise ValueError("At least one repository is required")
        for url in self.repositories:
            parsed = urlparse(url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError(f"Repository URL must be http(s): {url}")
        if self.timeout <= 0:
            raise ValueError("Timeout must be positive")
        for root in self.roots:
            try:
                Artifact.parse(root)
            except ClientError as exc:
                raise ValueError(str(exc)) from None

    def repository_objects(self) -> list[Repository]:
        return [Repository(base_url=url) for url in self.repositories]

    def root_artifacts(self) -> list[Artifact]:
        return [Artifact.parse(root).with_packaging(POM) for root in self.roots]
