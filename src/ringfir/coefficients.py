"""
Immutable FIR coefficient tables.
"""

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .errors import SymmetryError, TapCountError


class CoefficientTable:
    """
    Fixed-length sequence of real tap weights.

    The weights are copied on construction into a read-only array, so one
    table can be shared by any number of filters.
    """

    def __init__(
        self,
        coefficients: Sequence[float],
        size: Optional[int] = None,
        name: Optional[str] = None,
        dtype=np.float64
    ):
        """
        Parameters
        ----------
        coefficients : sequence of float
            Tap weights, first tap first
        size : int, optional
            Declared tap count; must match ``len(coefficients)`` when given
        name : str, optional
            Label used in logs and tap files
        dtype : numpy dtype
            Storage precision of the weights
        """
        taps = np.array(coefficients, dtype=dtype)
        if taps.ndim != 1:
            raise TapCountError(f"Coefficients must be one-dimensional, got shape {taps.shape}")
        if taps.size == 0:
            raise TapCountError("A coefficient table needs at least one tap")
        if size is not None and size != taps.size:
            raise TapCountError(f"Declared {size} taps but got {taps.size} coefficients")
        taps.flags.writeable = False

        self._taps = taps
        self.name = name or f"fir{taps.size}"
        self.log = logging.getLogger(__name__)
        self.log.debug("Coefficient table %s: %d taps (%s)", self.name, taps.size, taps.dtype)

    def size(self) -> int:
        return self._taps.size

    def coefficients(self) -> np.ndarray:
        return self._taps

    def __len__(self) -> int:
        return self._taps.size

    def __iter__(self) -> Iterator[float]:
        return iter(self._taps)

    def __getitem__(self, i):
        return self._taps[i]

    def __eq__(self, other):
        if not isinstance(other, CoefficientTable):
            return NotImplemented
        return np.array_equal(self._taps, other._taps)

    __hash__ = None

    def __repr__(self) -> str:
        return f"CoefficientTable(name={self.name!r}, taps={self._taps.tolist()!r})"

    def mirror_mismatches(self) -> List[Tuple[int, int]]:
        """Mirrored index pairs ``(i, N-1-i)`` whose weights differ."""
        n = self.size()
        half = n // 2
        front = self._taps[:half]
        back = self._taps[::-1][:half]
        return [(int(i), n - 1 - int(i)) for i in np.nonzero(front != back)[0]]

    def is_symmetric(self) -> bool:
        return not self.mirror_mismatches()

    def verify_symmetry(self) -> None:
        """
        Check that the table is palindromic (a linear-phase design).

        The middle tap of an odd-length table is unconstrained.

        Raises
        ------
        SymmetryError
            On the first mirrored pair that differs.
        """
        mismatches = self.mirror_mismatches()
        if not mismatches:
            self.log.info("Table %s is symmetric (%d taps)", self.name, self.size())
            return

        i, j = mismatches[0]
        self.log.warning("Table %s fails symmetry at %d of %d mirrored pairs",
                         self.name, len(mismatches), self.size() // 2)
        raise SymmetryError(
            f"{self.name}: tap {i} ({self._taps[i]!r}) != tap {j} ({self._taps[j]!r}); "
            f"{len(mismatches)} mismatched pair(s)"
        )
