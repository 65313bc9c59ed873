"""Exception classes used through the builder package."""


class FamilyIDError(Exception):
    """Exception for reading or modifying a hopping family with wrong id."""
    def __init__(self, family_id, num_families):
        super().__init__()
        self._family_id = family_id
        self._num_families = num_families

    def __str__(self):
        return f"family id {self._family_id} out of range " \
               f"[0, {self._num_families})"


class SiteIndexError(Exception):
    """Exception for a hopping term referring to a non-existing site."""
    def __init__(self, index, num_sites):
        super().__init__()
        self._index = index
        self._num_sites = num_sites

    def __str__(self):
        return f"site index {self._index} out of range [0, {self._num_sites})"


class FamilyCountLenError(Exception):
    """Exception for per-family quantities of wrong length."""
    def __init__(self, num_counts, num_families):
        super().__init__()
        self._num_counts = num_counts
        self._num_families = num_families

    def __str__(self):
        return f"length of per-family array {self._num_counts} does not " \
               f"match number of families {self._num_families}"


class CoordLenMismatchError(Exception):
    """Exception for row and column indices of different lengths."""
    def __init__(self, num_rows, num_cols):
        super().__init__()
        self._num_rows = num_rows
        self._num_cols = num_cols

    def __str__(self):
        return f"length of rows {self._num_rows} does not match length " \
               f"of cols {self._num_cols}"


class SiteIndexTypeError(Exception):
    """Exception for site indices of non-integer type."""
    def __init__(self, index_type):
        super().__init__()
        self._index_type = index_type

    def __str__(self):
        return f"illegal type {self._index_type} of site index"
