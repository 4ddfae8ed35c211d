from __future__ import annotations

from collections import deque
from collections.abc import Iterable

import networkx as nx


def classpath_order(g: nx.DiGraph, roots: Iterable[str]) -> list[str]:
    """Return nodes reachable from `roots` in breadth-first order.

    Roots come first, in the given order, then their dependencies level by
    level. This is the order the resolver walked them in, so it is a stable
    order for a classpath.
    """
    order: list[str] = []
    seen: set[str] = set()
    q: deque[str] = deque()
    for root in roots:
        if root in g and root not in seen:
            seen.add(root)
            q.append(root)

    while q:
        node = q.popleft()
        order.append(node)
        for nb in g.successors(node):
            nb_str = str(nb)
            if nb_str in seen:
                continue
            seen.add(nb_str)
            q.append(nb_str)

    return order
