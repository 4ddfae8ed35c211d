"""Parse Maven POM documents using lxml."""

from __future__ import annotations

from pathlib import Path

from lxml import etree

from mvn_resolver.exceptions import ClientError
from mvn_resolver.models import Artifact, Dependency, Parent, Project, dependency_map


_PROJECT = "/*[local-name()='project']"


def _text_first(node: etree._Element, xpath_expr: str) -> str | None:
    """Get text of the first matching element using namespace-agnostic XPath.

    Args:
        node: Root element to query under.
        xpath_expr: XPath expression (should use local-name()).

    Returns:
        Text content if found and non-empty, otherwise None.
    """
    found = node.xpath(xpath_expr)
    if not found:
        return None
    first = found[0]
    if isinstance(first, etree._Element):
        text = (first.text or "").strip()
        return text or None
    if isinstance(first, str):
        text = first.strip()
        return text or None
    return None


def _parse_xml(text: str) -> etree._Element:
    """Parse POM text and return its root element.

    Raises:
        ClientError: If the XML cannot be parsed.
    """
    try:
        parser = etree.XMLParser(resolve_entities=False, no_network=True, recover=False)
        # Bytes, so that an `encoding` declaration in the prolog is accepted.
        return etree.fromstring(text.encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError as exc:
        raise ClientError(f"Failed to parse POM: {exc}") from exc


def _artifact_at(node: etree._Element, *, packaging_tag: str) -> Artifact:
    return Artifact(
        group_id=_text_first(node, "./*[local-name()='groupId']"),
        artifact_id=_text_first(node, "./*[local-name()='artifactId']"),
        version=_text_first(node, "./*[local-name()='version']"),
        packaging=_text_first(node, f"./*[local-name()='{packaging_tag}']"),
        classifier=_text_first(node, "./*[local-name()='classifier']"),
    )


def _parse_dependencies(root: etree._Element, xpath_expr: str) -> list[Dependency]:
    deps: list[Dependency] = []
    for node in root.xpath(xpath_expr):
        if not isinstance(node, etree._Element):
            continue
        deps.append(
            Dependency(
                # A dependency's <type> is the packaging of the file it points at.
                artifact=_artifact_at(node, packaging_tag="type"),
                scope=_text_first(node, "./*[local-name()='scope']"),
            )
        )
    return deps


def _parse_properties(root: etree._Element) -> dict[str, str]:
    props: dict[str, str] = {}
    nodes = root.xpath(f"{_PROJECT}/*[local-name()='properties']/*")
    for n in nodes:
        if not isinstance(n, etree._Element):
            continue
        key = etree.QName(n).localname
        val = (n.text or "").strip()
        if key and val:
            props[key] = val
    return props


class LxmlPomParser:
    """`PomParser` for Maven 4.0.0 POM documents.

    Notes:
        - Namespace handling: uses `local-name()` XPath so it works with or
          without the Maven XML namespace.
        - No inheritance or interpolation happens here. Missing coordinate
          fields stay `None`; the resolver normalizes them against the parent.
    """

    def parse(self, text: str) -> Project:
        root = _parse_xml(text)
        if etree.QName(root).localname != "project":
            raise ClientError(f"Expected a <project> root element, got <{etree.QName(root).localname}>")

        artifact = _artifact_at(root, packaging_tag="packaging")
        if artifact.artifact_id is None:
            raise ClientError("Missing required <artifactId> in POM")

        parent: Parent | None = None
        parent_nodes = root.xpath(f"{_PROJECT}/*[local-name()='parent']")
        if parent_nodes:
            parent = Parent(artifact=_artifact_at(parent_nodes[0], packaging_tag="packaging"))

        dependencies = _parse_dependencies(
            root,
            f"{_PROJECT}/*[local-name()='dependencies']/*[local-name()='dependency']",
        )

        dependency_management = None
        dm_nodes = root.xpath(f"{_PROJECT}/*[local-name()='dependencyManagement']")
        if dm_nodes:
            dependency_management = dependency_map(
                _parse_dependencies(
                    dm_nodes[0],
                    "./*[local-name()='dependencies']/*[local-name()='dependency']",
                )
            )

        properties = _parse_properties(root)
        group_id = artifact.group_id or (parent.artifact.group_id if parent else None)
        builtins = {
            "project.groupId": group_id,
            "project.artifactId": artifact.artifact_id,
            "project.version": artifact.version or (parent.artifact.version if parent else None),
        }
        properties.update({k: v for k, v in builtins.items() if v is not None})

        return Project(
            parent=parent,
            artifact=artifact,
            dependencies=dependency_map(dependencies),
            dependency_management=dependency_management,
            properties=properties,
        )


def parse_pom_file(path: str | Path, parser: LxmlPomParser | None = None) -> Project:
    """Parse a POM from the local filesystem.

    Raises:
        ClientError: If the file cannot be read or parsed.
    """
    pom_path = Path(path)
    try:
        text = pom_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ClientError(f"Failed to read POM: {pom_path}") from exc
    return (parser or LxmlPomParser()).parse(text)
