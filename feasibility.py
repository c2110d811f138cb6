# Degree and subtour checks over the tentative path

from typing import List, Optional

from networkx.utils import UnionFind

DUMMY = -1


class PrematureCycleError(RuntimeError):
    """Raised when successor links close a cycle that does not cover every node."""


class PartialPath:
    """
    Successor links chosen along the current include branch.

    successors[node] is the node visited after `node`, or DUMMY while
    unassigned. Links are added with include() and removed with rollback()
    in stack order as the search backtracks.
    """

    def __init__(self, size: int):
        self.size = size
        self.successors: List[int] = [DUMMY] * size

    def include(self, origin: int, target: int) -> None:
        self.successors[origin] = target

    def rollback(self, origin: int) -> None:
        self.successors[origin] = DUMMY

    def clear(self) -> None:
        self.successors = [DUMMY] * self.size

    def components(self) -> UnionFind:
        groups = UnionFind(range(self.size))
        for origin, target in enumerate(self.successors):
            if target == DUMMY:
                continue
            if groups[origin] == groups[target]:
                raise PrematureCycleError(f"loop exists: {origin} -> {target} closes a subtour")
            groups.union(origin, target)
        return groups

    def canInclude(self, origin: int, target: int, groups: Optional[UnionFind] = None) -> bool:
        """True if origin -> target keeps every degree <= 1 and closes no cycle."""
        if self.successors[origin] != DUMMY:
            return False
        if target in self.successors:
            return False

        if groups is None:
            groups = self.components()
        return groups[origin] != groups[target]

    def canExclude(self, origin: int, target: int) -> bool:
        """True if origin can still leave elsewhere and target can still be entered from elsewhere."""
        groups = self.components()

        if not any(self.canInclude(origin, other, groups)
                   for other in range(self.size) if other != target):
            return False

        return any(self.canInclude(other, target, groups)
                   for other in range(self.size) if other != origin)
