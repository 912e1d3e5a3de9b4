# Copyright 2022-2023 ETH Zurich and the Daisytuner authors.
import networkx as nx

from types import MappingProxyType
from typing import Hashable, Iterable, Mapping, Optional

from loopdep.analysis.memory_access import RawAccess


class ObjectIdentityResolver(nx.DiGraph):
    """
    Alias graph of the containers accessed in a loop body. An edge u -> v
    states that u is another name for v. The canonical identity of a
    container is the unique alias-free container reachable from it; names
    reaching several or no such containers have no identity.
    """

    def __init__(self, accesses: Iterable[RawAccess] = ()) -> None:
        super().__init__()
        for access in accesses:
            self.add_node(access.target)
            if access.alias_of is not None and access.alias_of != access.target:
                self.add_edge(u_of_edge=access.target, v_of_edge=access.alias_of)

    def identity(self, target: Hashable) -> Optional[Hashable]:
        if target not in self:
            return None

        reachable = nx.descendants(self, target) | {target}
        roots = [node for node in reachable if self.out_degree(node) == 0]
        if len(roots) != 1:
            return None
        return roots[0]

    def resolve(self) -> Mapping[Hashable, Optional[Hashable]]:
        return MappingProxyType({node: self.identity(node) for node in self.nodes()})
