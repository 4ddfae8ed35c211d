"""Typer CLI entry point for mvn-resolver."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from mvn_resolver.config import ResolverConfig
from mvn_resolver.exceptions import ResolutionFailed, ResolverError
from mvn_resolver.graph import classpath_order
from mvn_resolver.models import Artifact
from mvn_resolver.resolver import Resolver, classpath
from mvn_resolver.transport import HttpUrlFetcher
from mvn_resolver.urls import create_url
from mvn_resolver.visualize import build_effective_tree, build_resolution_tree
from mvn_resolver.visualize_html import export_pyvis

app = typer.Typer(add_completion=False, help="Resolve Maven artifacts into a directory of jars.")
console = Console(stderr=True)

RepoOption = Annotated[
    Optional[list[str]],
    typer.Option("--repo", "-r", help="Repository base URL; repeat to try several in order."),
]


def setup_logging(verbose: bool = False) -> None:
    """Route log records through Rich on stderr; DEBUG when verbose."""
    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        log_time_format="[%H:%M:%S]",
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(name)s] %(message)s",
        handlers=[handler],
        force=True,
    )


def _load_config(repo: list[str] | None, **overrides: object) -> ResolverConfig:
    cfg = ResolverConfig.from_env()
    if repo:
        cfg.repositories = list(repo)
    for name, value in overrides.items():
        if value is not None:
            setattr(cfg, name, value)
    cfg.validate()
    return cfg


def _fail(exc: Exception) -> typer.Exit:
    message = Text("Error: ", style="bold red")
    message.append(str(exc))
    console.print(message)
    return typer.Exit(code=1)


@app.command()
def resolve(
    roots: Annotated[
        Optional[list[str]],
        typer.Argument(help="Root coordinates, groupId:artifactId:version. Defaults to MVN_RESOLVER_ROOTS."),
    ] = None,
    repo: RepoOption = None,
    target: Annotated[
        Optional[Path], typer.Option("--target", "-t", help="Directory to extract jars into.")
    ] = None,
    separator: Annotated[str, typer.Option("--separator", help="Classpath entry separator.")] = os.pathsep,
    tree: Annotated[bool, typer.Option("--tree", help="Print the dependency walk as a tree.")] = False,
    html: Annotated[Optional[Path], typer.Option("--html", help="Also write an HTML graph here.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Download ROOTS and their compile dependencies, then print the classpath in walk order."""
    setup_logging(verbose)
    try:
        cfg = _load_config(repo, roots=list(roots) if roots else None, target_dir=target)
        root_artifacts = cfg.root_artifacts()
        if not root_artifacts:
            console.print("[bold red]Error:[/bold red] No root coordinates given.")
            raise typer.Exit(code=1)

        with HttpUrlFetcher(timeout=cfg.timeout) as fetcher:
            resolver = Resolver(cfg.repository_objects(), url_fetcher=fetcher)
            done = resolver.download_all_jars(root_artifacts, cfg.target_dir)
    except ResolutionFailed as exc:
        if exc.completed:
            console.print(f"[dim]{len(exc.completed)} artifact(s) were extracted before the failure.[/dim]")
        raise _fail(exc) from None
    except (ResolverError, ValueError) as exc:
        raise _fail(exc) from None

    if tree:
        for root in root_artifacts:
            console.print(build_resolution_tree(resolver.graph, root.compact()))
    if html is not None:
        out_path = export_pyvis(resolver.graph, html, roots={r.compact() for r in root_artifacts})
        console.print(Text.assemble(("Wrote ", "green"), str(out_path)))

    order = classpath_order(resolver.graph, [r.compact() for r in root_artifacts])
    typer.echo(separator.join(str(p) for p in classpath(done, cfg.target_dir, order)))


@app.command()
def effective(
    coordinate: Annotated[str, typer.Argument(help="Coordinate: groupId:artifactId:version")],
    repo: RepoOption = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Print the effective project of COORDINATE (parents and BOMs applied)."""
    setup_logging(verbose)
    try:
        cfg = _load_config(repo)
        artifact = Artifact.parse(coordinate)
        with HttpUrlFetcher(timeout=cfg.timeout) as fetcher:
            project = Resolver(cfg.repository_objects(), url_fetcher=fetcher).build_effective_pom(artifact)
    except (ResolverError, ValueError) as exc:
        raise _fail(exc) from None

    Console().print(build_effective_tree(project))


@app.command()
def url(
    coordinate: Annotated[str, typer.Argument(help="Coordinate: groupId:artifactId:version[:packaging[:classifier]]")],
    repo: RepoOption = None,
) -> None:
    """Print the URL of COORDINATE in every configured repository."""
    try:
        cfg = _load_config(repo)
        artifact = Artifact.parse(coordinate)
        for repository in cfg.repository_objects():
            typer.echo(create_url(repository, artifact))
    except (ResolverError, ValueError) as exc:
        raise _fail(exc) from None


def main() -> None:
    """Console-script entry point."""
    app()
