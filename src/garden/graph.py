"""Local graph around a note, and its JSON projection.

:func:`local_graph` walks outbound links breadth-first from a focal note.
The result can be handed to a page widget as plain data with
:func:`graph_to_dict`.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

import networkx as nx

from garden.paths import ItemPath

if TYPE_CHECKING:
    from garden.vault import Vault


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def local_graph(vault: "Vault", focal: ItemPath, max_depth: int) -> nx.DiGraph | None:
    """Return the subgraph reachable from *focal*, or ``None`` if it is not a note.

    Nodes of the returned graph are :data:`ItemPath` values.  Every expanded
    note contributes all of its outbound edges, so the frontier it links to
    is included too.

    *max_depth* counts expanded notes, not BFS layers: the counter goes up
    once per note taken off the queue and expanded, and expansion stops once
    it exceeds *max_depth*.  For a chain ``a -> b -> c`` and ``max_depth=1``
    both ``a`` and ``b`` are expanded, giving ``{a, b, c}``.
    """
    if focal not in vault:
        return None

    graph = nx.DiGraph()
    queue: deque[ItemPath] = deque([focal])
    discovered: set[ItemPath] = set()
    depth = 0

    while queue:
        path = queue.popleft()
        if depth > max_depth:
            break
        if path in discovered:
            continue
        discovered.add(path)

        graph.add_node(path)
        for succ in vault.links_from(path):
            queue.append(succ)
            graph.add_edge(path, succ)

        depth += 1

    return graph


def graph_to_dict(graph: nx.DiGraph) -> dict[str, list[dict[str, str]]]:
    """Return ``{"nodes": [...], "links": [...]}`` with string ids, sorted."""
    return {
        "nodes": [{"id": str(path)} for path in sorted(graph.nodes)],
        "links": [{"source": str(src), "target": str(tgt)} for src, tgt in sorted(graph.edges)],
    }
