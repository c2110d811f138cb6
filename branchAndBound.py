# Branch and Bound

import logging
import sys
from typing import List, Tuple

import numpy as np

from feasibility import DUMMY, PartialPath, PrematureCycleError
from nna import NNA
from reduction import MAX_VAL, findBestAdvantageArc, reduceMatrix, removeArc, setNoSelfLoops

logger = logging.getLogger(__name__)


class InvalidCostMatrixError(ValueError):
    """Raised when a cost matrix cannot describe a complete directed graph."""


def getMatrixCopy(adjMatrix) -> np.ndarray:
    """Validate the input and return it as a private float matrix. The diagonal is ignored."""
    try:
        matrix = np.array(adjMatrix, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidCostMatrixError(f"Cost matrix must be a rectangular grid of numbers: {e}") from e

    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise InvalidCostMatrixError(f"Cost matrix must be square, got shape {matrix.shape}")

    n = matrix.shape[0]
    if n < 2:
        raise InvalidCostMatrixError(f"Cost matrix needs at least 2 nodes, got {n}")

    costs = matrix[~np.eye(n, dtype=bool)]
    if not np.isfinite(costs).all():
        raise InvalidCostMatrixError("Every off-diagonal cost must be finite")
    if (costs < 0).any():
        raise InvalidCostMatrixError("Every off-diagonal cost must be non-negative")

    return matrix


class branchAndBoundATSP:
    """
    Minimum-cost Hamiltonian circuit over a directed cost matrix.

    Each search level reduces its matrix, picks the zero arc with the largest
    opportunity cost and branches twice: include the arc (its row and column
    leave the matrix) or exclude it (its entry becomes MAX_VAL). A branch is
    cut as soon as its reduction bound reaches the best circuit found so far.

    All search state lives on the instance and is reset by every TSP() call.
    """

    def __init__(self, adjMatrix, warmStart: bool = False, checkExcludeFeasibility: bool = True):
        self.adjMatrix = getMatrixCopy(adjMatrix)
        self.N = len(self.adjMatrix)
        self.warmStart = warmStart
        self.checkExcludeFeasibility = checkExcludeFeasibility
        self.resetSearch()

    def resetSearch(self) -> None:
        self.currentPath = PartialPath(self.N)
        self.optimalSuccessors: List[int] = [DUMMY] * self.N
        self.finalResult = MAX_VAL
        self.finalPath: List[int] = [None] * (self.N + 1)
        self.nodesExplored = 0
        self.boundHistory: List[float] = []

    def seedFromNearestNeighbor(self) -> None:
        nna = NNA()
        tour = nna.nearest_neighbor_tsp(self.adjMatrix)
        self.finalResult = nna.tour_cost(self.adjMatrix, tour)
        self.optimalSuccessors = nna.tour_successors(tour)
        self.boundHistory.append(self.finalResult)
        logger.debug(f"Nearest neighbour seeds bound {self.finalResult} with tour {tour}")

    def copyToFinal(self, origin: int, target: int, lowerBound: float) -> None:
        self.finalResult = lowerBound
        self.optimalSuccessors[:] = self.currentPath.successors
        self.optimalSuccessors[origin] = target
        self.boundHistory.append(lowerBound)
        logger.debug(f"Improved circuit cost {lowerBound} after {self.nodesExplored} search nodes")

    def TSPRec(self, rows: List[int], cols: List[int], matrix: np.ndarray, lowerBound: float = 0.0) -> None:
        self.nodesExplored += 1
        if lowerBound >= self.finalResult:
            return

        lowerBound += reduceMatrix(matrix)
        if lowerBound >= self.finalResult:
            return

        arc = findBestAdvantageArc(matrix)
        origin, target = rows[arc.rowIndex], cols[arc.colIndex]

        if len(rows) == 1:
            # the last open row and column are the tail and head of a Hamiltonian path
            lowerBound += arc.cost
            if lowerBound < self.finalResult:
                self.copyToFinal(origin, target, lowerBound)
            return

        canInclude = self.currentPath.canInclude(origin, target)
        canExclude = not self.checkExcludeFeasibility or self.currentPath.canExclude(origin, target)
        if not (canInclude or canExclude):
            return

        if canInclude:
            newRows, newCols, newMatrix = removeArc(arc, rows, cols, matrix)
            self.currentPath.include(origin, target)
            try:
                self.TSPRec(newRows, newCols, newMatrix, lowerBound + arc.cost)
            finally:
                self.currentPath.rollback(origin)

        if canExclude:
            if arc.opportunityCost + lowerBound >= self.finalResult:
                return

            excluded = matrix.copy()
            excluded[arc.rowIndex, arc.colIndex] = MAX_VAL
            self.TSPRec(rows, cols, excluded, lowerBound)

    def getOptimalPath(self, startFrom: int = 0) -> List[int]:
        """Follow the best successor links from startFrom until they return to it."""
        if not 0 <= startFrom < self.N:
            raise ValueError(f"startFrom must be in [0, {self.N}), got {startFrom}")

        path = []
        seen = [False] * self.N
        curr = startFrom
        while True:
            path.append(curr)
            seen[curr] = True
            curr = self.optimalSuccessors[curr]
            if curr == startFrom:
                break
            if curr == DUMMY or curr is None or seen[curr]:
                raise PrematureCycleError(f"Successor links {self.optimalSuccessors} do not form a circuit")

        if len(path) != self.N:
            raise PrematureCycleError(f"Circuit {path} covers {len(path)} of {self.N} nodes")
        return path

    def TSP(self) -> Tuple[float, List[int]]:
        self.resetSearch()
        if self.warmStart:
            self.seedFromNearestNeighbor()

        matrix = self.adjMatrix.copy()
        setNoSelfLoops(matrix)
        rows = list(range(self.N))
        cols = list(range(self.N))

        # exclude branches keep the matrix size, so depth can reach about N * N
        recursionLimit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(recursionLimit, self.N * self.N + self.N + 100))
        try:
            self.TSPRec(rows, cols, matrix)
        finally:
            sys.setrecursionlimit(recursionLimit)

        path = self.getOptimalPath()
        self.finalPath = path + [path[0]]
        logger.info(f"Optimal circuit over {self.N} nodes costs {self.finalResult} "
                    f"({self.nodesExplored} search nodes)")
        return self.finalResult, self.finalPath


def getHamiltonCircuit(adjMatrix, startFrom: int = 0) -> List[int]:
    """
    Solve the asymmetric TSP for an n x n cost matrix.

    Returns the n nodes of a minimum-cost circuit in visiting order, starting
    at startFrom; the return leg to startFrom is implied.
    """
    solver = branchAndBoundATSP(adjMatrix)
    solver.TSP()
    return solver.getOptimalPath(startFrom)
