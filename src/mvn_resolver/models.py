"""Pydantic models for Maven coordinates, dependencies and projects."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mvn_resolver.exceptions import ClientError


COMPILE_SCOPE = "compile"
IMPORT_SCOPE = "import"
POM = "pom"
JAR = "jar"
AAR = "aar"

MAVEN_CENTRAL_URL = "https://repo.maven.apache.org/maven2"
GOOGLE_MAVEN_URL = "https://dl.google.com/dl/android/maven2"

_UNSET = "?"


class Artifact(BaseModel):
    """Maven coordinates, any of which may be missing.

    Partial coordinates show up while parsing child POMs: a module usually
    inherits its groupId and version from the parent. `normalize` is the
    only place that fills the gaps.
    """

    model_config = ConfigDict(frozen=True)

    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    packaging: str | None = None
    classifier: str | None = None

    @classmethod
    def pom(cls, group_id: str, artifact_id: str, version: str) -> Artifact:
        return cls(group_id=group_id, artifact_id=artifact_id, version=version, packaging=POM)

    @classmethod
    def parse(cls, text: str) -> Artifact:
        """Parse `groupId:artifactId:version[:packaging[:classifier]]`.

        Raises:
            ClientError: If fewer than three or more than five parts are given.
        """
        parts = [p.strip() for p in (text or "").strip().split(":")]
        if len(parts) < 3 or len(parts) > 5 or not all(parts[:3]):
            raise ClientError.invalid_data(
                f"expected groupId:artifactId:version[:packaging[:classifier]], got {text!r}"
            )
        packaging = parts[3] if len(parts) > 3 and parts[3] else None
        classifier = parts[4] if len(parts) > 4 and parts[4] else None
        return cls(
            group_id=parts[0],
            artifact_id=parts[1],
            version=parts[2],
            packaging=packaging,
            classifier=classifier,
        )

    @property
    def version_cleaned(self) -> str | None:
        """Version with soft-pin brackets removed (`[1.0]` -> `1.0`).

        This is not Maven's range grammar; ranges like `[1.0,2.0)` are not
        resolved.
        """
        if self.version is None:
            return None
        return self.version.replace("[", "").replace("]", "")

    @property
    def is_fully_specified(self) -> bool:
        return bool(self.group_id and self.artifact_id and self.version)

    def with_packaging(self, packaging: str) -> Artifact:
        return self.model_copy(update={"packaging": packaging})

    def interpolate(self, properties: Mapping[str, str]) -> Artifact:
        """Substitute the first `${name}` in the version from `properties`.

        Unknown placeholders are left as-is. Other fields are not touched.
        """
        version = self.version
        if version is None:
            return self
        start = version.find("${")
        if start < 0:
            return self
        end = version.find("}", start)
        if end < 0:
            return self
        value = properties.get(version[start + 2 : end])
        if value is None:
            return self
        return self.model_copy(update={"version": version[:start] + value + version[end + 1 :]})

    def normalize(self, parent: Artifact, default_packaging: str) -> Artifact:
        """Fill missing groupId/artifactId/version from `parent`.

        The classifier is not carried over.
        """
        return Artifact(
            group_id=self.group_id if self.group_id is not None else parent.group_id,
            artifact_id=self.artifact_id if self.artifact_id is not None else parent.artifact_id,
            version=self.version if self.version is not None else parent.version,
            packaging=self.packaging if self.packaging is not None else default_packaging,
        )

    def filename(self) -> PurePosixPath:
        """Relative path of the artifact inside an extraction directory.

        Returns:
            A path like `artifactId/version.packaging`.
        """
        for field_name in ("artifact_id", "version", "packaging"):
            if getattr(self, field_name) is None:
                raise ClientError.missing_parameter(self, field_name)
        return PurePosixPath(self.artifact_id) / f"{self.version_cleaned}.{self.packaging}"

    def compact(self) -> str:
        """Return a compact string representation.

        Returns:
            A string like `groupId:artifactId:version`.
        """
        return ":".join(v or _UNSET for v in (self.group_id, self.artifact_id, self.version))

    def __str__(self) -> str:
        return ":".join(
            v or _UNSET
            for v in (self.group_id, self.artifact_id, self.version, self.packaging, self.classifier)
        )


class DependencyKey(BaseModel):
    """Identity of a dependency inside one project: versions do not participate."""

    model_config = ConfigDict(frozen=True)

    group_id: str | None = None
    artifact_id: str | None = None

    def __str__(self) -> str:
        return f"{self.group_id or _UNSET}:{self.artifact_id or _UNSET}"


class Dependency(BaseModel):
    """A Maven dependency entry."""

    artifact: Artifact
    scope: str | None = None

    def key(self) -> DependencyKey:
        return DependencyKey(group_id=self.artifact.group_id, artifact_id=self.artifact.artifact_id)

    def normalize(self, parent: Artifact, default_packaging: str) -> Dependency:
        return Dependency(
            artifact=self.artifact.normalize(parent, default_packaging),
            scope=self.scope or COMPILE_SCOPE,
        )

    @property
    def is_import(self) -> bool:
        return self.scope == IMPORT_SCOPE

    def label(self) -> str:
        """Return a user-facing label for the dependency.

        Returns:
            A formatted string including GAV and scope when present.
        """
        parts: list[str] = [self.artifact.compact()]
        if self.scope:
            parts.append(f"(scope={self.scope})")
        return " ".join(parts)


class Parent(BaseModel):
    artifact: Artifact


class Project(BaseModel):
    """A Maven project model.

    `dependencies` and `dependency_management` keep descriptor order, which
    is also the order the transitive walk enqueues compile dependencies in.
    """

    parent: Parent | None = None
    artifact: Artifact
    dependencies: dict[DependencyKey, Dependency] = Field(default_factory=dict)
    dependency_management: dict[DependencyKey, Dependency] | None = None
    properties: dict[str, str] = Field(default_factory=dict)

    def compile_dependencies(self) -> list[Dependency]:
        return [d for d in self.dependencies.values() if d.scope == COMPILE_SCOPE]

    def boms(self) -> list[Dependency]:
        return [d for d in (self.dependency_management or {}).values() if d.is_import]


class Repository(BaseModel):
    """A remote Maven repository."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., min_length=1)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def maven_central(cls) -> Repository:
        return cls(base_url=MAVEN_CENTRAL_URL)

    @classmethod
    def google_maven(cls) -> Repository:
        return cls(base_url=GOOGLE_MAVEN_URL)


def dependency_map(dependencies: list[Dependency]) -> dict[DependencyKey, Dependency]:
    """Key dependencies by groupId:artifactId; the first declaration wins."""
    out: dict[DependencyKey, Dependency] = {}
    for dep in dependencies:
        out.setdefault(dep.key(), dep)
    return out


def normalize_dependencies(
    dependencies: Mapping[DependencyKey, Dependency],
    parent: Artifact,
    default_packaging: str,
) -> dict[DependencyKey, Dependency]:
    return dependency_map([d.normalize(parent, default_packaging) for d in dependencies.values()])
