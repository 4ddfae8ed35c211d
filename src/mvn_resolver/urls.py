"""Mapping from (repository, coordinate) to remote artifact URLs."""

from __future__ import annotations

from pathlib import Path

from mvn_resolver.exceptions import ClientError
from mvn_resolver.models import JAR, Artifact, Repository


def _require(artifact: Artifact, field_name: str, label: str) -> str:
    value = getattr(artifact, field_name)
    if value is None:
        raise ClientError.missing_parameter(artifact, label)
    return value


def create_url(repository: Repository, artifact: Artifact) -> str:
    """Build the URL of an artifact file in a Maven 2 layout repository.

    Example:
        `com.acme:lib:[1.0]` with classifier `sources` becomes
        `{base}/com/acme/lib/1.0/lib-1.0-sources.jar`.

    Raises:
        ClientError: If groupId, artifactId or version is missing.
    """
    group_id = _require(artifact, "group_id", "groupId")
    artifact_id = _require(artifact, "artifact_id", "artifactId")
    _require(artifact, "version", "version")
    packaging = artifact.packaging or JAR
    version = artifact.version_cleaned

    url = (
        f"{repository.base_url}/{group_id.replace('.', '/')}/{artifact_id}/{version}"
        f"/{artifact_id}-{version}"
    )
    if artifact.classifier is not None:
        url += f"-{artifact.classifier}"
    return f"{url}.{packaging}"


def extraction_path(target_dir: Path, artifact: Artifact) -> Path:
    """Where the jar of `artifact` lives under `target_dir`."""
    return target_dir / artifact.with_packaging(JAR).filename()
