"""
Stateful FIR convolution over a circular sample history.

Each ``feed`` overwrites the oldest slot in place and rotates the read
pattern instead of shifting the window, so bookkeeping is O(1) and the
weighted sum is O(N) per sample.
"""

import itertools
import logging
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .coefficients import CoefficientTable
from .errors import FilterError
from .samples import SampleKind, sample_kind

log = logging.getLogger(__name__)


class RingFilter:
    """
    FIR filter holding the N most recent samples in a ring buffer.

    Build one directly from a table, or call :func:`define_filter` to get a
    subclass with the table and sample type bound, whose constructor takes
    no arguments.

    A single instance is not safe to feed from several threads at once;
    serialise calls to :meth:`feed` or give each producer its own filter.
    """

    table: Optional[CoefficientTable] = None
    sample_type: Any = float

    def __init__(self, table=None, sample_type=None):
        if table is None:
            table = type(self).table
        if table is None:
            raise FilterError(f"{type(self).__name__} has no coefficient table bound")
        if not isinstance(table, CoefficientTable):
            table = CoefficientTable(table)
        if sample_type is None:
            sample_type = type(self).sample_type

        self.table = table
        self.sample_type = sample_type
        self._kind = sample_kind(sample_type)
        self._weights = self._kind.weights(table.coefficients())
        self._history = self._kind.allocate(table.size())
        # Index of the oldest stored sample, i.e. the next slot to overwrite
        self._cursor = 0

        log.debug("%s: %d taps, %s samples", type(self).__name__,
                  table.size(), self._kind.dtype)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(taps={self.size}, cursor={self._cursor})"

    @property
    def size(self) -> int:
        return len(self._history)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def kind(self) -> SampleKind:
        return self._kind

    @classmethod
    def storage(cls) -> np.ndarray:
        """Fresh zero-filled history buffer for the bound table and sample type."""
        if cls.table is None:
            raise FilterError(f"{cls.__name__} has no coefficient table bound")
        return sample_kind(cls.sample_type).allocate(cls.table.size())

    def feed(self, sample):
        """Store ``sample`` in the history and return the filtered output."""
        self._history[self._cursor] = sample
        self._cursor = (self._cursor + 1) % len(self._history)
        return self._convolve()

    def _convolve(self):
        # Coefficient j pairs with the sample j positions newer than the
        # oldest one. Both ranges share one accumulator so the terms are
        # summed in coefficient order 0..N-1.
        idx = self._cursor
        split = len(self._history) - idx
        acc = self._kind.zero
        for c, x in zip(self._weights[:split], self._history[idx:]):
            acc = acc + x * c
        for c, x in zip(self._weights[split:], self._history[:idx]):
            acc = acc + x * c
        return acc

    def process(self, samples: Iterable) -> List:
        """Feed every sample in order and collect the outputs."""
        return [self.feed(s) for s in samples]

    def reset(self) -> None:
        """Zero the history and rewind the cursor."""
        self._history.fill(self._kind.zero)
        self._cursor = 0

    def history_segments(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Read-only views of the history: oldest sample up to the buffer end,
        then buffer start up to the newest sample.
        """
        older = self._history[self._cursor:].view()
        newer = self._history[:self._cursor].view()
        older.flags.writeable = False
        newer.flags.writeable = False
        return older, newer

    def history(self) -> Iterator:
        """Stored samples, oldest first and newest last."""
        older, newer = self.history_segments()
        return itertools.chain(older, newer)


def define_filter(name: str, sample_type: Any, size: int,
                  coefficients: Sequence[float]) -> type:
    """
    Create a :class:`RingFilter` subclass bound to one table and sample type.

    Parameters
    ----------
    name : str
        Class name, also used as the table name
    sample_type : type
        Sample type accepted by :func:`ringfir.samples.sample_kind`
    size : int
        Declared tap count
    coefficients : sequence of float
        Exactly ``size`` tap weights

    Returns
    -------
    type
        Subclass whose instances start with zeroed history.
    """
    table = CoefficientTable(coefficients, size=size, name=name)
    kind = sample_kind(sample_type)
    log.debug("Defined filter %s: %d taps over %s", name, size, kind.dtype)
    return type(name, (RingFilter,), {
        "__doc__": f"{size}-tap FIR filter over {getattr(sample_type, '__name__', sample_type)} samples.",
        "table": table,
        "sample_type": sample_type,
    })
