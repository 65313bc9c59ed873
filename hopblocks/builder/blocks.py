"""Functions and classes for accumulating hopping terms in per-family blocks."""

from typing import Iterator, Sequence, Tuple, Union

import numpy as np
from scipy.sparse import coo_matrix, csr_matrix

from ..cython import blocks as core
from ..utils import print_banner_line
from . import exceptions as exc
from .base import IDX_TYPE, FamilyBlock, index_type, indices_type


__all__ = ["HoppingBlocks"]


class HoppingBlocks:
    """
    Container class for hopping terms arranged in per-family blocks.

    Attributes
    ----------
    _num_sites: int
        number of lattice sites, i.e. the size of the square matrix
    _num_families: int
        number of hopping families, i.e. the number of blocks
    _check_bounds: bool
        whether to validate family ids and site indices on insertion
    _rows: List[np.ndarray]
        row buffers of all blocks, indexed by family id
    _cols: List[np.ndarray]
        column buffers of all blocks, indexed by family id
    _sizes: (num_families,) int64 array
        number of hopping terms stored in each block
    _nnz: int
        total number of hopping terms

    NOTES
    -----
    1. Implicit data

    Each block corresponds to a COO sparse matrix where all the elements in
    the data array are the same and equal to the index of the block, i.e.
    the hopping family id:

            block 0                 block 1                 block 2
        row | col | data        row | col | data        row | col | data
        ----------------        ----------------        ----------------
         0  |  1  |  0           0  |  4  |  1           1  |  3  |  2
         0  |  4  |  0           2  |  3  |  1           4  |  4  |  2
         1  |  2  |  0           2  |  0  |  1           7  |  9  |  2
         3  |  2  |  0          ----------------         8  |  1  |  2
         7  |  5  |  0                                  ----------------
        ----------------

    Since the data array is trivial, it is not stored. It is restored from
    the block index when converting to CSR or COO format.

    2. Duplicates

    Hopping terms are never merged. Adding the same pair twice, to the same
    family or to different ones, yields two entries in the CSR matrix.

    3. Ordering

    Within a row of the CSR matrix, entries are grouped by increasing family
    id and then follow the insertion order. Columns are NOT sorted.
    """
    MIN_CAPACITY = 8

    def __init__(self, num_sites: int,
                 num_families: int,
                 check_bounds: bool = True) -> None:
        """
        :param num_sites: number of lattice sites
        :param num_families: number of hopping families
        :param check_bounds: whether to validate family ids and site indices
            on insertion, disable only if the caller guarantees valid input
        :return: None
        :raises ValueError: if num_sites or num_families is negative or
            exceeds the range of IDX_TYPE
        """
        num_sites, num_families = int(num_sites), int(num_families)
        idx_max = np.iinfo(IDX_TYPE).max
        if not 0 <= num_sites <= idx_max:
            raise ValueError(f"Illegal number of sites {num_sites}")
        if not 0 <= num_families <= idx_max:
            raise ValueError(f"Illegal number of families {num_families}")
        self._num_sites = num_sites
        self._num_families = num_families
        self._check_bounds = check_bounds
        self._rows = [np.zeros(0, dtype=IDX_TYPE) for _ in range(num_families)]
        self._cols = [np.zeros(0, dtype=IDX_TYPE) for _ in range(num_families)]
        self._sizes = np.zeros(num_families, dtype=np.int64)
        self._nnz = 0

    @classmethod
    def from_blocks(cls, num_sites: int,
                    blocks: Sequence[Union[Sequence[Tuple[int, int]],
                                           np.ndarray]],
                    check_bounds: bool = True) -> "HoppingBlocks":
        """
        Create an instance from existing blocks of coordinates.

        :param num_sites: number of lattice sites
        :param blocks: coordinates of each family, each item being a list of
            (row, col) pairs or a (num_hop, 2) integer array
        :param check_bounds: whether to validate site indices
        :return: the new instance with len(blocks) families
        :raises SiteIndexError: if any index is out of range
        """
        hop_blocks = cls(num_sites, len(blocks), check_bounds=check_bounds)
        for family_id, coords in enumerate(blocks):
            coords = np.asarray(coords).reshape(-1, 2)
            hop_blocks.append(family_id, coords[:, 0], coords[:, 1])
        return hop_blocks

    def _check_family_id(self, family_id: index_type) -> None:
        """
        Check if the family id is in range.

        :param family_id: id of hopping family
        :return: None
        :raises FamilyIDError: if family_id is out of range
        """
        if not 0 <= family_id < self._num_families:
            raise exc.FamilyIDError(family_id, self._num_families)

    def _check_site_indices(self, indices: np.ndarray) -> None:
        """
        Check if all the site indices are in range.

        :param indices: site indices to check
        :return: None
        :raises SiteIndexTypeError: if indices are not integers
        :raises SiteIndexError: if any index is out of range
        """
        if indices.shape[0] == 0:
            return
        if not np.issubdtype(indices.dtype, np.integer):
            raise exc.SiteIndexTypeError(indices.dtype)
        mask = (indices < 0) | (indices >= self._num_sites)
        if mask.any():
            raise exc.SiteIndexError(indices[mask][0], self._num_sites)

    def _grow(self, family_id: int, capacity: int) -> None:
        """
        Reallocate the buffers of a block, keeping existing hopping terms.

        :param family_id: id of hopping family
        :param capacity: new capacity of the block
        :return: None
        """
        size = self._sizes[family_id]
        for buffers in (self._rows, self._cols):
            new_buffer = np.empty(capacity, dtype=IDX_TYPE)
            new_buffer[:size] = buffers[family_id][:size]
            buffers[family_id] = new_buffer

    def _ensure_capacity(self, family_id: int, required: int) -> None:
        """
        Make sure that a block can hold given number of hopping terms.

        Capacity is at least doubled on each reallocation, so that the cost of
        adding hopping terms one by one is amortized constant.

        :param family_id: id of hopping family
        :param required: required capacity of the block
        :return: None
        """
        capacity = self._rows[family_id].shape[0]
        if required > capacity:
            self._grow(family_id, max(required, 2 * capacity,
                                      self.MIN_CAPACITY))

    def reserve(self, counts: indices_type) -> None:
        """
        Reserve space for given number of hopping terms per family.

        Only the capacity is changed. Stored hopping terms and nnz are not
        affected.

        :param counts: (num_families,) expected number of hopping terms of
            each family
        :return: None
        :raises FamilyCountLenError: if length of counts does not match the
            number of families
        :raises ValueError: if any count is negative
        """
        counts = np.asarray(counts, dtype=np.int64).reshape(-1)
        if counts.shape[0] != self._num_families:
            raise exc.FamilyCountLenError(counts.shape[0], self._num_families)
        if np.any(counts < 0):
            raise ValueError(f"Negative counts in {counts}")
        for family_id, count in enumerate(counts):
            if count > self._rows[family_id].shape[0]:
                self._grow(family_id, int(count))

    def add(self, family_id: index_type,
            row: index_type,
            col: index_type) -> None:
        """
        Add a single hopping term to given family block.

        :param family_id: id of hopping family
        :param row: row index of the hopping term
        :param col: column index of the hopping term
        :return: None
        :raises FamilyIDError: if family_id is out of range
        :raises SiteIndexTypeError: if row or col is not an integer
        :raises SiteIndexError: if row or col is out of range
        """
        if self._check_bounds:
            self._check_family_id(family_id)
            for index in (row, col):
                if isinstance(index, bool) or \
                        not isinstance(index, (int, np.integer)):
                    raise exc.SiteIndexTypeError(type(index))
                if not 0 <= index < self._num_sites:
                    raise exc.SiteIndexError(index, self._num_sites)
        size = self._sizes[family_id]
        self._ensure_capacity(family_id, size + 1)
        self._rows[family_id][size] = row
        self._cols[family_id][size] = col
        self._sizes[family_id] = size + 1
        self._nnz += 1

    def append(self, family_id: index_type,
               rows: indices_type,
               cols: indices_type) -> None:
        """
        Append a range of hopping terms to given family block.

        Equivalent to calling 'add' for each (rows[i], cols[i]) pair, but
        copies all the terms at once.

        :param family_id: id of hopping family
        :param rows: row indices of hopping terms
        :param cols: column indices of hopping terms
        :return: None
        :raises FamilyIDError: if family_id is out of range
        :raises CoordLenMismatchError: if rows and cols have different lengths
        :raises SiteIndexTypeError: if rows or cols are not integers
        :raises SiteIndexError: if any row or col is out of range
        """
        rows = np.asarray(rows).reshape(-1)
        cols = np.asarray(cols).reshape(-1)
        if rows.shape[0] != cols.shape[0]:
            raise exc.CoordLenMismatchError(rows.shape[0], cols.shape[0])
        if self._check_bounds:
            self._check_family_id(family_id)
            self._check_site_indices(rows)
            self._check_site_indices(cols)
        num_hop = rows.shape[0]
        size = self._sizes[family_id]
        self._ensure_capacity(family_id, size + num_hop)
        self._rows[family_id][size:size+num_hop] = rows
        self._cols[family_id][size:size+num_hop] = cols
        self._sizes[family_id] = size + num_hop
        self._nnz += num_hop

    def _view(self, family_id: int) -> FamilyBlock:
        """
        Get a read-only view on the hopping terms of one family.

        :param family_id: id of hopping family
        :return: view on the block
        """
        size = int(self._sizes[family_id])
        views = []
        for buffers in (self._rows, self._cols):
            if size == 0:
                view = np.zeros(0, dtype=IDX_TYPE)
            else:
                # Arrays on a read-only buffer cannot be made writable again
                buffer = memoryview(buffers[family_id]).toreadonly()
                view = np.frombuffer(buffer, dtype=IDX_TYPE, count=size)
            view.flags.writeable = False
            views.append(view)
        return FamilyBlock(family_id, views[0], views[1])

    def __iter__(self) -> Iterator[FamilyBlock]:
        """Iterate over all the blocks in ascending order of family id."""
        for family_id in range(self._num_families):
            yield self._view(family_id)

    def __len__(self) -> int:
        """Return the number of blocks."""
        return self._num_families

    def get_block(self, family_id: index_type) -> FamilyBlock:
        """
        Get the hopping terms of one family.

        :param family_id: id of hopping family
        :return: read-only view on the block
        :raises FamilyIDError: if family_id is out of range
        """
        self._check_family_id(family_id)
        return self._view(int(family_id))

    def get_blocks(self) -> Tuple[FamilyBlock, ...]:
        """
        Get the hopping terms of all families.

        :return: read-only views on all the blocks, indexed by family id
        """
        return tuple(self)

    def capacity(self, family_id: index_type) -> int:
        """
        Get the number of hopping terms a block can hold without reallocation.

        :param family_id: id of hopping family
        :return: capacity of the block
        :raises FamilyIDError: if family_id is out of range
        """
        self._check_family_id(family_id)
        return self._rows[family_id].shape[0]

    def count_hops(self) -> np.ndarray:
        """
        Count the hopping terms of each family.

        :return: (num_families,) int64 array, number of hopping terms
        """
        return self._sizes.copy()

    def to_csr_arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Convert the blocks to arrays of CSR format.

        The conversion is done by counting the hopping terms on each row,
        turning the counts into row pointers by prefix sum, and then
        scattering the terms into their rows family by family. Time cost is
        O(num_sites + nnz).

        :return: (indptr, indices, data)
            indptr: (num_sites+1,) int64 array, row pointers
            indices: (nnz,) int32 array, column indices
            data: (nnz,) int32 array, family ids of hopping terms
        """
        indptr = np.zeros(self._num_sites + 1, dtype=np.int64)
        indices = np.empty(self._nnz, dtype=IDX_TYPE)
        data = np.empty(self._nnz, dtype=IDX_TYPE)

        # Count hopping terms on each row
        row_count = indptr[1:]
        for family_id in range(self._num_families):
            size = self._sizes[family_id]
            core.count_rows(self._rows[family_id][:size], row_count)
        indptr = np.cumsum(indptr)

        # Scatter hopping terms into rows
        cursor = indptr[:-1].copy()
        for family_id in range(self._num_families):
            size = self._sizes[family_id]
            core.scatter_block(self._rows[family_id][:size],
                               self._cols[family_id][:size],
                               family_id, cursor, indices, data)
        return indptr, indices, data

    def to_csr(self) -> csr_matrix:
        """
        Convert the blocks to a CSR sparse matrix.

        Duplicate entries are kept and columns are not sorted. See the notes
        of the class for the ordering of entries.

        :return: (num_sites, num_sites) CSR matrix with family ids as data
        """
        indptr, indices, data = self.to_csr_arrays()
        shape = (self._num_sites, self._num_sites)
        return csr_matrix((data, indices, indptr), shape=shape)

    def to_coo(self) -> coo_matrix:
        """
        Convert the blocks to a COO sparse matrix by appending all the blocks
        and restoring the implicit data array.

        :return: (num_sites, num_sites) COO matrix with family ids as data
        """
        blocks = self.get_blocks()
        rows = np.zeros(0, dtype=IDX_TYPE)
        cols = np.zeros(0, dtype=IDX_TYPE)
        if len(blocks) > 0:
            rows = np.concatenate([block.rows for block in blocks])
            cols = np.concatenate([block.cols for block in blocks])
        data = np.repeat(np.arange(self._num_families, dtype=IDX_TYPE),
                         self._sizes)
        shape = (self._num_sites, self._num_sites)
        return coo_matrix((data, (rows, cols)), shape=shape)

    def build_ham_csr(self, hop_eng: Union[Sequence[complex], np.ndarray],
                      hermitian: bool = False) -> csr_matrix:
        """
        Build the Hamiltonian by replacing family ids with hopping energies.

        :param hop_eng: (num_families,) hopping energy of each family
        :param hermitian: whether to add the conjugate transpose, should be
            enabled if only half of the hopping terms have been added
        :return: (num_sites, num_sites) complex128 CSR matrix
        :raises FamilyCountLenError: if length of hop_eng does not match the
            number of families
        """
        hop_eng = np.asarray(hop_eng, dtype=np.complex128).reshape(-1)
        if hop_eng.shape[0] != self._num_families:
            raise exc.FamilyCountLenError(hop_eng.shape[0],
                                          self._num_families)
        indptr, indices, data = self.to_csr_arrays()
        shape = (self._num_sites, self._num_sites)
        ham_csr = csr_matrix((hop_eng[data], indices, indptr), shape=shape)
        if hermitian:
            ham_csr = ham_csr + ham_csr.conj().transpose()
        return ham_csr.tocsr()

    def report(self) -> None:
        """
        Print the number of hopping terms and capacity of each block.

        :return: None
        """
        spaces = " " * 2
        print_banner_line("Hopping blocks")
        print(f"{spaces}{'num_sites':16s} : {self._num_sites:<10d}")
        print(f"{spaces}{'num_families':16s} : {self._num_families:<10d}")
        for block in self:
            capacity = self._rows[block.family_id].shape[0]
            print(f"{spaces}{'family ' + str(block.family_id):16s} : "
                  f"{block.num_hop:<10d} (capacity {capacity})")
        print(f"{spaces}{'nnz':16s} : {self._nnz:<10d}")

    @property
    def num_sites(self) -> int:
        """Interface for the '_num_sites' attribute."""
        return self._num_sites

    @property
    def num_families(self) -> int:
        """Interface for the '_num_families' attribute."""
        return self._num_families

    @property
    def check_bounds(self) -> bool:
        """Interface for the '_check_bounds' attribute."""
        return self._check_bounds

    @property
    def nnz(self) -> int:
        """Number of non-zeros, i.e. the total number of hopping terms."""
        return self._nnz
