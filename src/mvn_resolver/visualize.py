"""Rich rendering utilities for resolved dependencies."""

from __future__ import annotations

import networkx as nx
from rich.text import Text
from rich.tree import Tree

from mvn_resolver.models import Project


def build_effective_tree(model: Project) -> Tree:
    """Build a Rich Tree of an effective project.

    Coordinates are added as `Text`, so `:name:` segments are never read as
    emoji codes or markup.

    Args:
        model: Effective project, as returned by `Resolver.build_effective_pom`.

    Returns:
        A Rich Tree object for rendering.
    """
    root = Tree(Text(model.artifact.compact(), style="bold"))
    if model.parent is not None:
        label = Text("parent ", style="dim")
        label.append(model.parent.artifact.compact())
        root.add(label)

    if not model.dependencies:
        root.add(Text("No dependencies found", style="dim"))
    else:
        deps_branch = root.add("dependencies")
        for dep in model.dependencies.values():
            deps_branch.add(Text(dep.label()))

    if model.dependency_management:
        dm_branch = root.add("dependencyManagement")
        for dep in model.dependency_management.values():
            dm_branch.add(Text(dep.label()))
    return root


def build_resolution_tree(g: nx.DiGraph, root_gav: str) -> Tree:
    """Render the compile-dependency walk below `root_gav`.

    Nodes already shown elsewhere in the tree are printed once more, dimmed,
    without their children.
    """
    tree = Tree(Text(root_gav, style="bold"))
    shown: set[str] = {root_gav}

    def add_children(branch: Tree, node: str) -> None:
        for child in sorted(str(c) for c in g.successors(node)):
            if child in shown:
                branch.add(Text(f"{child} (*)", style="dim"))
                continue
            shown.add(child)
            add_children(branch.add(Text(child)), child)

    if root_gav in g:
        add_children(tree, root_gav)
    return tree
