"""Effective-project assembly and transitive jar resolution."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path

import networkx as nx

from mvn_resolver.cache import ProjectCache
from mvn_resolver.exceptions import (
    ArtifactNotFoundError,
    ClientError,
    ProjectCycleError,
    ResolutionFailed,
    ResolverError,
)
from mvn_resolver.models import (
    JAR,
    POM,
    Artifact,
    Dependency,
    DependencyKey,
    Parent,
    Project,
    Repository,
    normalize_dependencies,
)
from mvn_resolver.packages import PACKAGE_TYPES, Packaging, package_for
from mvn_resolver.parser import LxmlPomParser
from mvn_resolver.ports import PomParser, UrlFetcher
from mvn_resolver.transport import HttpUrlFetcher
from mvn_resolver.urls import create_url, extraction_path

logger = logging.getLogger(__name__)

# Placeholder parent used to apply default packaging and scope to
# dependencies of projects that declare no <parent>.
_NO_PARENT = Artifact()


class ResolutionState(str, Enum):
    """Lifecycle of one coordinate inside `download_all_jars`."""

    ENQUEUED = "enqueued"
    ASSEMBLING = "assembling"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    COMPLETE = "complete"
    FAILED = "failed"


def _interpolated(
    dependencies: dict[DependencyKey, Dependency], properties: dict[str, str]
) -> dict[DependencyKey, Dependency]:
    return {
        key: Dependency(artifact=dep.artifact.interpolate(properties), scope=dep.scope)
        for key, dep in dependencies.items()
    }


class Resolver:
    """Resolves Maven coordinates to extracted jar files.

    One instance owns one project cache; reuse it across calls to avoid
    refetching POMs. Everything runs on the calling thread.

    Args:
        repositories: Repositories in lookup order. Defaults to Maven Central;
            an empty list means nothing can be found.
        url_fetcher: Transport; defaults to an `HttpUrlFetcher` that is closed
            by `close()` or on leaving a `with` block.
        pom_parser: POM parser; defaults to `LxmlPomParser`.
    """

    def __init__(
        self,
        repositories: Sequence[Repository] | None = None,
        *,
        url_fetcher: UrlFetcher | None = None,
        pom_parser: PomParser | None = None,
    ) -> None:
        if repositories is None:
            repositories = [Repository.maven_central()]
        self.repositories: list[Repository] = list(repositories)
        self._own_fetcher: HttpUrlFetcher | None = None
        if url_fetcher is None:
            url_fetcher = self._own_fetcher = HttpUrlFetcher()
        self.url_fetcher: UrlFetcher = url_fetcher
        self.pom_parser: PomParser = pom_parser or LxmlPomParser()
        self.project_cache = ProjectCache()
        self.states: dict[Artifact, ResolutionState] = {}
        self.graph = nx.DiGraph()
        self._assembling: list[Artifact] = []

    def __enter__(self) -> Resolver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport if this resolver created it; injected ones are left alone."""
        if self._own_fetcher is not None:
            self._own_fetcher.close()

    def fetch_project(self, repository: Repository, artifact: Artifact) -> Project:
        """Fetch, parse and normalize one POM, going through the cache.

        Raises:
            ArtifactNotFoundError: If `repository` does not have the POM.
            ClientError: On any other transport or parse failure.
        """
        artifact = artifact.with_packaging(POM)

        cached = self.project_cache.get(artifact)
        if cached is not None:
            logger.debug("returning from cache %s", artifact)
            return cached

        url = create_url(repository, artifact)
        logger.debug("fetching %s", url)
        project = self.pom_parser.parse(self.url_fetcher.fetch(url))

        project_id = project.artifact.with_packaging(POM)
        if project.parent is not None:
            parent_id = project.parent.artifact.with_packaging(POM)
            project_id = project_id.normalize(parent_id, POM)
            project.parent = Parent(artifact=parent_id)
        else:
            parent_id = _NO_PARENT

        project.dependencies = normalize_dependencies(project.dependencies, parent_id, JAR)
        if project.dependency_management is not None:
            project.dependency_management = normalize_dependencies(
                project.dependency_management, parent_id, JAR
            )
        project.artifact = project_id

        key = self.project_cache.put(project)
        logger.debug("caching %s", key)
        return project

    def build_effective_pom(self, artifact: Artifact) -> Project:
        """Assemble the effective project of `artifact`.

        Parents are merged first (child dependencies shadow the parent's),
        then dependency versions are interpolated and BOM imports expanded.
        The first repository that has the POM wins.

        Raises:
            ArtifactNotFoundError: If no repository has the POM.
            ProjectCycleError: If a parent or BOM chain loops back.
            ClientError: On any other failure; later repositories are not tried.
        """
        artifact = artifact.with_packaging(POM)
        if artifact in self._assembling:
            chain = " -> ".join(a.compact() for a in [*self._assembling, artifact])
            raise ProjectCycleError(f"Cyclic parent/BOM reference: {chain}")

        self._assembling.append(artifact)
        try:
            return self._assemble(artifact)
        finally:
            self._assembling.pop()

    def _assemble(self, artifact: Artifact) -> Project:
        logger.debug("building an effective pom for %s", artifact)

        for repository in self.repositories:
            try:
                project = self.fetch_project(repository, artifact)
            except ArtifactNotFoundError as exc:
                logger.debug("%s: %s", repository.base_url, exc)
                continue

            if artifact.version is not None:
                project.properties["project.version"] = artifact.version

            if project.parent is not None:
                parent_project = self.build_effective_pom(project.parent.artifact)
                logger.debug("got a parent POM: %s", parent_project.artifact)
                self._inherit(project, parent_project)

            project.dependencies = _interpolated(project.dependencies, project.properties)

            if project.dependency_management is not None:
                managed = _interpolated(project.dependency_management, project.properties)
                project.dependency_management = managed
                for bom in project.boms():
                    logger.debug("got a BOM artifact: %s", bom.artifact)
                    bom_project = self.build_effective_pom(bom.artifact)
                    if bom_project.dependency_management:
                        managed.update(bom_project.dependency_management)
                self._apply_managed_versions(project)

            return project

        raise ArtifactNotFoundError.file_not_found(str(artifact))

    @staticmethod
    def _inherit(project: Project, parent_project: Project) -> None:
        for key, dep in parent_project.dependencies.items():
            project.dependencies.setdefault(key, dep)
        for name, value in parent_project.properties.items():
            project.properties.setdefault(name, value)
        if parent_project.dependency_management is not None:
            managed = project.dependency_management or {}
            for key, dep in parent_project.dependency_management.items():
                managed.setdefault(key, dep)
            project.dependency_management = managed

    @staticmethod
    def _apply_managed_versions(project: Project) -> None:
        managed = project.dependency_management or {}
        for key, dep in project.dependencies.items():
            if dep.artifact.version is None and key in managed:
                version = managed[key].artifact.version
                project.dependencies[key] = Dependency(
                    artifact=dep.artifact.model_copy(update={"version": version}),
                    scope=dep.scope,
                )

    def try_download_package(self, artifact: Artifact) -> Packaging:
        """Download the binary of `artifact`, trying `aar` then `jar` per repository.

        Raises:
            ArtifactNotFoundError: If no repository and packaging combination worked.
        """
        for repository in self.repositories:
            for packaging in PACKAGE_TYPES:
                url = create_url(repository, artifact.with_packaging(packaging))
                try:
                    data = self.url_fetcher.fetch_bytes(url)
                except ArtifactNotFoundError as exc:
                    logger.debug("Trying other packaging: %s", exc)
                    continue
                except ClientError as exc:
                    logger.warning("Download of %s failed, trying next candidate: %s", url, exc)
                    continue
                return package_for(packaging, data)

        raise ArtifactNotFoundError.file_not_found(artifact.artifact_id or str(artifact))

    def download_all_jars(self, root_artifacts: Iterable[Artifact], root_directory: Path) -> set[Artifact]:
        """Resolve roots and their compile dependencies into `root_directory`.

        Each coordinate ends up as `{root_directory}/{artifactId}/{version}.jar`.
        Files that already exist are not downloaded again. `states` is reset at
        the start of every run; `graph` keeps growing across runs.

        Returns:
            The resolved coordinates, with packaging `jar`.

        Raises:
            ResolutionFailed: When one coordinate cannot be resolved. Files
                extracted so far stay on disk and are listed on the exception.
        """
        root_directory = Path(root_directory)
        self.states.clear()
        todo: deque[Artifact] = deque()
        for root in root_artifacts:
            self._enqueue(todo, root)
            self.graph.add_node(root.compact())

        done: set[Artifact] = set()
        completed: set[Artifact] = set()

        while todo:
            artifact = todo.popleft()
            if artifact in done:
                continue
            done.add(artifact)

            logger.debug("Resolving %s...", artifact)
            try:
                project = self._resolve_one(artifact, root_directory)
            except (ResolverError, OSError) as exc:
                self.states[artifact] = ResolutionState.FAILED
                raise ResolutionFailed(artifact, exc, completed) from exc
            self.states[artifact] = ResolutionState.COMPLETE
            completed.add(artifact.with_packaging(JAR))

            source = artifact.compact()
            for dep in project.compile_dependencies():
                self.graph.add_edge(source, dep.artifact.compact(), scope=dep.scope)
                self._enqueue(todo, dep.artifact)

        return {a.with_packaging(JAR) for a in done}

    def _enqueue(self, todo: deque[Artifact], artifact: Artifact) -> None:
        artifact = artifact.with_packaging(POM)
        self.states.setdefault(artifact, ResolutionState.ENQUEUED)
        todo.append(artifact)

    def _resolve_one(self, artifact: Artifact, root_directory: Path) -> Project:
        self.states[artifact] = ResolutionState.ASSEMBLING
        project = self.build_effective_pom(artifact)
        if not project.artifact.is_fully_specified:
            raise ClientError.cant_resolve(artifact, f"effective coordinate {project.artifact} is incomplete")

        (root_directory / project.artifact.artifact_id).mkdir(parents=True, exist_ok=True)
        extract_path = extraction_path(root_directory, project.artifact)

        if extract_path.exists():
            logger.info("%s already present at %s", project.artifact.compact(), extract_path)
            return project

        self.states[artifact] = ResolutionState.FETCHING
        package = self.try_download_package(project.artifact)
        self.states[artifact] = ResolutionState.EXTRACTING
        package.extract_jar_file(extract_path)
        logger.info("extracted %s (%s) to %s", project.artifact.compact(), package.packaging, extract_path)
        return project


def classpath(
    artifacts: Iterable[Artifact], root_directory: Path, order: Sequence[str] | None = None
) -> list[Path]:
    """Absolute paths of the extracted jars of `artifacts`.

    Without `order` the paths are sorted. `order` lists coordinates as
    `Artifact.compact()` strings, usually `graph.classpath_order(resolver.graph, roots)`;
    paths then follow it, and coordinates it does not mention come last, sorted.
    """
    root_directory = Path(root_directory)
    rank = {gav: i for i, gav in enumerate(order or ())}
    ordered = sorted(
        artifacts,
        key=lambda a: (rank.get(a.compact(), len(rank)), extraction_path(root_directory, a)),
    )
    return [extraction_path(root_directory, a).resolve() for a in ordered]
