"""Dependency graph over resolved relationships.

This module builds a NetworkX directed graph where an edge points from a
child (referencing) table to its parent (referenced) table. The graph is
used to report reference cycles, self-referential relationships and a
population order in which tables can be loaded parents-first.

Classes:
- DependencyGraph: Graph wrapper with cycle and ordering queries
"""

from __future__ import annotations

from collections.abc import Iterable

from fastmcp.utilities.logging import get_logger
import networkx as nx

from schemalens_mcp.schema_tools.models import Relationship

# Logger
_logger = get_logger("schemalens.graph")


class DependencyGraph:
    """Table dependency graph built from relationships.

    Attributes:
        graph: Directed graph, child -> parent
    """

    def __init__(self, tables: Iterable[str], relationships: Iterable[Relationship]) -> None:
        """Build the graph.

        Args:
            tables: Table names to include as nodes
            relationships: Relationships to add as child -> parent edges
        """
        self.graph: nx.DiGraph[str] = nx.DiGraph()
        self._self_referential: list[Relationship] = []
        for table in tables:
            self.graph.add_node(table)
        for rel in relationships:
            if rel.is_self_referential:
                self._self_referential.append(rel)
                continue
            self.graph.add_edge(rel.source_table, rel.target_table)

    def cycles(self) -> list[list[str]]:
        """Return reference cycles between distinct tables.

        Each cycle is rotated to start at its smallest table name; the list
        is sorted for deterministic output. Self-references are reported by
        :meth:`self_referential` instead.
        """
        found: list[list[str]] = []
        for cycle in nx.simple_cycles(self.graph):
            pivot = cycle.index(min(cycle))
            found.append(cycle[pivot:] + cycle[:pivot])
        found.sort()
        if found:
            _logger.debug("Detected %d reference cycles", len(found))
        return found

    def self_referential(self) -> list[Relationship]:
        return sorted(self._self_referential, key=lambda r: r.key)

    def population_order(self) -> list[str]:
        """Return tables ordered so every parent precedes its children.

        Tables that reference each other in a cycle are grouped together and
        ordered by name within the group. Ties are broken lexicographically.
        """
        # Reverse to parent -> child so a topological sort yields parents first
        forward = self.graph.reverse(copy=True)
        if nx.is_directed_acyclic_graph(forward):
            return list(nx.lexicographical_topological_sort(forward))

        condensed = nx.condensation(forward)
        members: dict[int, list[str]] = {
            node: sorted(data["members"]) for node, data in condensed.nodes(data=True)
        }
        order: list[str] = []
        for node in nx.lexicographical_topological_sort(condensed, key=lambda n: members[n][0]):
            order.extend(members[node])
        return order
