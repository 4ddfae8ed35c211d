"""Custom exceptions for mvn-resolver."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mvn_resolver.models import Artifact


class ResolverError(Exception):
    """Base exception for mvn-resolver."""


class ClientError(ResolverError):
    """Raised for malformed input, unparseable POMs and unexpected HTTP failures."""

    @classmethod
    def missing_parameter(cls, artifact: Artifact, field_name: str) -> ClientError:
        return cls(f"'{field_name}' is missing from {artifact}")

    @classmethod
    def invalid_data(cls, details: str) -> ClientError:
        return cls(f"Invalid input data: {details}")

    @classmethod
    def cant_resolve(cls, artifact: Artifact, cause: str) -> ClientError:
        return cls(f"Can't resolve {artifact}: {cause}")


class ArtifactNotFoundError(ResolverError):
    """Raised when a resource is absent from a repository.

    This is the only error the resolver recovers from, by moving on to the
    next packaging or the next repository.
    """

    @classmethod
    def file_not_found(cls, what: str) -> ArtifactNotFoundError:
        return cls(f"Can't find {what}")


class ProjectCycleError(ClientError):
    """Raised when a parent or BOM chain refers back to a project being assembled."""


class ExtractionError(ResolverError):
    """Raised when a downloaded package cannot be turned into a jar file."""


class ResolutionFailed(ResolverError):
    """Raised by the transitive walk when one coordinate fails.

    Attributes:
        artifact: The coordinate that failed.
        completed: Coordinates (packaging `jar`) extracted before the failure.
    """

    def __init__(self, artifact: Artifact, cause: Exception, completed: set[Artifact]):
        super().__init__(f"Failed to resolve {artifact.compact()}: {cause}")
        self.artifact = artifact
        self.cause = cause
        self.completed = completed
