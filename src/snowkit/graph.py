"""
Dependency graph over resource specs.

Provides the fixed execution order used by both lifecycle phases: a
topological sort of depends_on with ties broken by declaration order for
provisioning, and its exact reverse for teardown. The graph is validated
when it is built, so a cyclic or dangling declaration fails before any
operation touches the account.
"""

import heapq
import logging
from typing import Dict, Iterable, List, Set

from snowkit.errors import ConfigurationError
from snowkit.models import ResourceSpec, normalize_identifier

logger = logging.getLogger(__name__)


class DependencyGraph:
    """
    Validated DAG of resource specs.

    Args:
        specs: Specs in declaration order
        strict: If True, every depends_on entry must name a spec in the set.
            Teardown builds a non-strict graph because it routinely runs over
            a subset of the declared resources; edges leaving the subset are
            ignored.

    Raises:
        ConfigurationError: On duplicate names, unknown dependencies (strict)
            or cycles
    """

    def __init__(self, specs: Iterable[ResourceSpec], strict: bool = True):
        self._specs: List[ResourceSpec] = list(specs)
        self._index: Dict[str, int] = {}
        self._edges: Dict[str, List[str]] = {}

        for position, spec in enumerate(self._specs):
            if spec.key in self._index:
                raise ConfigurationError(f"Duplicate resource declaration: {spec.name}")
            self._index[spec.key] = position

        for spec in self._specs:
            deps: List[str] = []
            for dep in spec.depends_on:
                dep_key = normalize_identifier(dep)
                if dep_key == spec.key:
                    raise ConfigurationError(f"{spec.name} depends on itself")
                if dep_key not in self._index:
                    if strict:
                        raise ConfigurationError(f"{spec.name} depends on undeclared resource {dep}")
                    logger.debug(f"Ignoring dependency {dep} of {spec.name}: not in this resource set")
                    continue
                if dep_key not in deps:
                    deps.append(dep_key)
            self._edges[spec.key] = deps

        self._order = self._sort()

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, name: str) -> bool:
        return normalize_identifier(name) in self._index

    def get(self, name: str) -> ResourceSpec:
        return self._specs[self._index[normalize_identifier(name)]]

    def dependencies(self, name: str) -> List[str]:
        """Direct dependencies (normalized keys) that are part of this graph."""
        return list(self._edges[normalize_identifier(name)])

    def order(self) -> List[ResourceSpec]:
        """Dependencies before dependents, ties by declaration order."""
        return list(self._order)

    def reverse_order(self) -> List[ResourceSpec]:
        """Dependents before dependencies: the exact reverse of order()."""
        return list(reversed(self._order))

    def transitive_dependents(self, name: str) -> Set[str]:
        """Keys of every spec that depends, directly or not, on name."""
        target = normalize_identifier(name)
        dependents: Set[str] = set()
        for spec in self._order:
            if any(dep == target or dep in dependents for dep in self._edges[spec.key]):
                dependents.add(spec.key)
        return dependents

    def _sort(self) -> List[ResourceSpec]:
        remaining = {key: len(deps) for key, deps in self._edges.items()}
        children: Dict[str, List[str]] = {key: [] for key in self._edges}
        for key, deps in self._edges.items():
            for dep in deps:
                children[dep].append(key)

        ready = [self._index[key] for key, count in remaining.items() if count == 0]
        heapq.heapify(ready)

        ordered: List[ResourceSpec] = []
        while ready:
            spec = self._specs[heapq.heappop(ready)]
            ordered.append(spec)
            for child in children[spec.key]:
                remaining[child] -= 1
                if remaining[child] == 0:
                    heapq.heappush(ready, self._index[child])

        if len(ordered) != len(self._specs):
            cyclic = sorted(
                (self._specs[self._index[key]].name for key, count in remaining.items() if count > 0),
            )
            raise ConfigurationError(f"Dependency cycle among: {', '.join(cyclic)}")
        return ordered
