"""Composition root for the documentation object graph.

Builds root entities from raw records and offers consumer-driven traversal.
Nothing is walked eagerly: `walk`, `index` and `usage_graph` only resolve
the fields they visit.
"""
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import networkx as nx

from .entities import Class_, Function_, Usage
from .leaf import LeafEntity
from .registry import EntityKind, EntityRegistry, default_registry


class DocumentGraph:
    """Build and traverse documentation entity trees."""

    def __init__(self, registry: Optional[EntityRegistry] = None):
        """Initialize the graph builder.

        Args:
            registry: Entity registry to resolve kind names (defaults to the
                shared registry with every built-in entity)
        """
        self.registry = registry or default_registry

    def build(self, root_record, kind: EntityKind = 'function') -> LeafEntity:
        """Build a single root entity with no parent.

        Args:
            root_record: Raw record for the root
            kind: Entity kind name or class ('function', 'usage', 'file', ...)

        Returns:
            Root entity; its fields resolve lazily on access
        """
        cls = self.registry.resolve(kind)
        return cls(root_record, None)

    def build_all(self, records: Iterable, kind: EntityKind = 'file') -> List[LeafEntity]:
        """Build one root entity per raw record, keeping input order."""
        cls = self.registry.resolve(kind)
        return [cls(record, None) for record in records]

    def walk(self, entity: LeafEntity, max_depth: Optional[int] = None,
             include_usages: bool = True) -> Iterator[Tuple[str, LeafEntity]]:
        """Depth-first traversal over child entities.

        Yields ``(path, entity)`` pairs, starting with the entity itself at
        path ``''``. Children are visited in declared field order and, within a
        mapping, in insertion order.

        Args:
            entity: Entity to start from
            max_depth: Stop descending below this many levels (None for no limit)
            include_usages: When False, usage blocks and the call references
                inside them are skipped

        Yields:
            Tuples of dotted path and entity
        """
        seen = set()
        stack: List[Tuple[str, LeafEntity, int]] = [('', entity, 0)]

        while stack:
            path, current, depth = stack.pop()
            if id(current) in seen:
                continue
            if not include_usages and isinstance(current, Usage):
                continue
            seen.add(id(current))
            yield path, current

            if max_depth is not None and depth >= max_depth:
                continue

            children = list(_children(current, path))
            # Reverse so the first child is popped first
            for child_path, child in reversed(children):
                stack.append((child_path, child, depth + 1))

    def index(self, roots: Iterable[LeafEntity]) -> Dict[str, LeafEntity]:
        """Map qualified names to declared functions, classes and methods.

        Usage references are not indexed, only declarations.

        Args:
            roots: Root entities (files, classes or functions)

        Returns:
            Dictionary of qualified name to entity
        """
        declarations: Dict[str, LeafEntity] = {}
        for root in roots:
            for _, entity in self.walk(root):
                if isinstance(entity, (Function_, Class_)) and not _in_usage(entity):
                    name = entity.qualified_name()
                    if name:
                        declarations[name] = entity
        return declarations

    def usage_graph(self, roots: Iterable[LeafEntity]) -> nx.DiGraph:
        """Build a directed graph of calls between functions and methods.

        Edge (A, B) means "A calls B". Callees that are never declared in the
        export still appear as nodes, flagged ``declared=False``.

        Args:
            roots: Root entities (files, classes or functions)

        Returns:
            NetworkX DiGraph keyed by qualified name
        """
        graph = nx.DiGraph()
        declarations = self.index(roots)

        for name, entity in declarations.items():
            graph.add_node(name, kind=entity.kind, declared=True)

        for caller_name, caller in declarations.items():
            if not isinstance(caller, Function_):
                continue
            for callee_name, callee in caller.usages().items():
                if not callee_name:
                    continue
                if callee_name not in graph:
                    graph.add_node(callee_name, kind=callee.kind, declared=False)
                graph.add_edge(caller_name, callee_name, line=callee.get('line'))

        return graph


def _children(entity: LeafEntity, path: str) -> Iterator[Tuple[str, LeafEntity]]:
    prefix = f"{path}." if path else ''
    for field in entity.KNOWN_KEYS:
        if not entity.raw_fields.has(field):
            continue
        value = entity.get(field)
        if isinstance(value, LeafEntity):
            yield f"{prefix}{field}", value
        elif isinstance(value, dict):
            for key, item in value.items():
                if isinstance(item, LeafEntity):
                    yield f"{prefix}{field}[{key}]", item
        elif isinstance(value, list):
            for position, item in enumerate(value):
                if isinstance(item, LeafEntity):
                    yield f"{prefix}{field}[{position}]", item


def _in_usage(entity: LeafEntity) -> bool:
    return entity.ancestor(Usage) is not None

