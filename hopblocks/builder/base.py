"""Base functions and classes used through the builder package."""

from collections import namedtuple
from typing import List, Sequence, Union

import numpy as np


# Shortcuts for typing
index_type = Union[int, np.integer]
indices_type = Union[Sequence[int], np.ndarray]

# Data type of row/column indices and family ids
IDX_TYPE = np.int32


Coordinate = namedtuple("Coordinate", ["row", "col"])


class FamilyBlock(namedtuple("FamilyBlock", ["family_id", "rows", "cols"])):
    """
    Read-only view on the hopping terms of one family.

    Attributes
    ----------
    family_id: int
        id of the hopping family, i.e. the index of the block
    rows: (num_hop,) int32 array
        row indices of hopping terms, not writable
    cols: (num_hop,) int32 array
        column indices of hopping terms, not writable

    NOTE: rows and cols share memory with the container that produced the
    view. They are invalidated once the container grows the block.
    """
    __slots__ = ()

    @property
    def num_hop(self) -> int:
        """Number of hopping terms in this block."""
        return self.rows.shape[0]

    @property
    def coordinates(self) -> List[Coordinate]:
        """
        Get the hopping terms as a list of coordinates.

        :return: coordinates in insertion order
        """
        return [Coordinate(int(row), int(col))
                for row, col in zip(self.rows, self.cols)]

    def to_array(self) -> np.ndarray:
        """
        Copy the hopping terms to an array.

        :return: (num_hop, 2) int32 array, rows and columns of hopping terms
        """
        return np.column_stack((self.rows, self.cols)).astype(IDX_TYPE)
