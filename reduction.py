# Reduced-matrix lower bounds and branching-arc selection

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

MAX_VAL = np.inf


@dataclass
class Arc:
    """A candidate arc in compressed-matrix coordinates."""
    rowIndex: int
    colIndex: int
    cost: float
    opportunityCost: float


def setNoSelfLoops(matrix: np.ndarray) -> None:
    np.fill_diagonal(matrix, MAX_VAL)


def reduceMatrix(matrix: np.ndarray) -> float:
    """
    Subtract every row minimum, then every column minimum, in place.
    Returns the total subtracted, a lower bound on completing this subproblem.
    A row or column with no finite entry cannot be completed: MAX_VAL is
    returned and the matrix is left partially reduced.
    """
    rowMin = matrix.min(axis=1)
    if np.isinf(rowMin).any():
        return MAX_VAL
    matrix -= rowMin[:, np.newaxis]

    colMin = matrix.min(axis=0)
    if np.isinf(colMin).any():
        return MAX_VAL
    matrix -= colMin[np.newaxis, :]

    return float(rowMin.sum() + colMin.sum())


def firstTwoSmallest(matrix: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    # pad with a MAX_VAL row/column so a single row or column still has a second value
    padded = np.pad(matrix, ((0, 1), (0, 1)), constant_values=MAX_VAL)
    rowsMinimum = np.sort(padded[:-1, :], axis=1)[:, :2]
    colsMinimum = np.sort(padded[:, :-1], axis=0)[:2, :].T
    return rowsMinimum, colsMinimum


def findBestAdvantageArc(matrix: np.ndarray) -> Arc:
    """
    Pick the cheapest arc whose exclusion would raise the bound the most.

    The opportunity cost of a cell is what its row and column would have to
    pay next if the cell were forbidden. Ties go to the first cell in
    row-major order.
    """
    rowsMinimum, colsMinimum = firstTwoSmallest(matrix)
    best = None

    for row, col in np.argwhere(matrix == matrix.min()):
        cost = matrix[row, col]
        rowFirst, rowSecond = rowsMinimum[row]
        colFirst, colSecond = colsMinimum[col]
        opportunityCost = (rowSecond if cost == rowFirst else rowFirst) + \
            (colSecond if cost == colFirst else colFirst)

        if best is None or opportunityCost > best.opportunityCost:
            best = Arc(int(row), int(col), float(cost), float(opportunityCost))

    return best


def removeArc(arc: Arc, rows: List[int], cols: List[int], matrix: np.ndarray) -> Tuple[List[int], List[int], np.ndarray]:
    """Drop the arc's row and column, returning fresh index lists and a new matrix."""
    newRows = rows[:arc.rowIndex] + rows[arc.rowIndex + 1:]
    newCols = cols[:arc.colIndex] + cols[arc.colIndex + 1:]
    newMatrix = np.delete(np.delete(matrix, arc.rowIndex, axis=0), arc.colIndex, axis=1)
    return newRows, newCols, newMatrix
