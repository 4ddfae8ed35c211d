"""In-memory cache of normalized projects."""

from __future__ import annotations

from mvn_resolver.models import POM, Artifact, Project


class ProjectCache:
    """Projects keyed by their normalized coordinate (packaging `pom`).

    Reads and writes copy, so neither the caller nor the effective-project
    assembly can mutate a cached entry. Entries are never evicted.
    """

    def __init__(self) -> None:
        self._projects: dict[Artifact, Project] = {}

    def get(self, artifact: Artifact) -> Project | None:
        cached = self._projects.get(artifact.with_packaging(POM))
        if cached is None:
            return None
        return cached.model_copy(deep=True)

    def put(self, project: Project) -> Artifact:
        """Store `project` under its own coordinate and return that key."""
        key = project.artifact.with_packaging(POM)
        self._projects[key] = project.model_copy(deep=True)
        return key

    def __contains__(self, artifact: object) -> bool:
        return isinstance(artifact, Artifact) and artifact.with_packaging(POM) in self._projects

    def __len__(self) -> int:
        return len(self._projects)
