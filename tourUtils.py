from sys import maxsize
from typing import Hashable, List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np

from branchAndBound import InvalidCostMatrixError


def calculateTourCost(graph, tour: Sequence[int]) -> float:
    """Circular cost of a tour given open ([0, 2, 1]) or closed ([0, 2, 1, 0])."""
    if len(tour) > 1 and tour[0] == tour[-1]:
        tour = tour[:-1]
    return sum(graph[tour[i]][tour[(i + 1) % len(tour)]] for i in range(len(tour)))


def next_permutation(lst):
    n = len(lst)
    i = n - 2

    while i >= 0 and lst[i] >= lst[i + 1]:
        i -= 1

    if i == -1:
        return False

    j = n - 1
    while lst[j] <= lst[i]:
        j -= 1

    lst[i], lst[j] = lst[j], lst[i]
    lst[i + 1:] = reversed(lst[i + 1:])
    return True


def travelling_salesman_function(graph, s=0):
    """Exhaustive search over every circuit through s. Only practical for small graphs."""
    vertex = [i for i in range(len(graph)) if i != s]

    min_path_value = maxsize
    best_path = []
    while True:
        current_path = [s] + vertex + [s]
        current_distance = calculateTourCost(graph, current_path)

        if current_distance < min_path_value:
            min_path_value = current_distance
            best_path = current_path

        if not next_permutation(vertex):
            break
    return min_path_value, best_path


def matrixFromGraph(G: nx.Graph, weight: str = "weight",
                    nodelist: Optional[List[Hashable]] = None) -> Tuple[np.ndarray, List[Hashable]]:
    """
    Dense cost matrix for a networkx graph, rows and columns in nodelist order.

    Undirected edges count in both directions. Every ordered pair of distinct
    nodes needs an arc; a missing one raises InvalidCostMatrixError.
    """
    if nodelist is None:
        nodelist = list(G)

    matrix = nx.to_numpy_array(G, nodelist=nodelist, weight=weight, nonedge=np.inf)
    np.fill_diagonal(matrix, np.inf)

    missing = np.argwhere(np.isinf(matrix) & ~np.eye(len(nodelist), dtype=bool))
    if len(missing):
        u, v = missing[0]
        raise InvalidCostMatrixError(f"No arc from {nodelist[u]!r} to {nodelist[v]!r}")

    return matrix, nodelist
