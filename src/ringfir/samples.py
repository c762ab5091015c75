"""
Sample types a filter can run over.

A sample type needs three things: a zero value, addition closed over the
type, and scaling by a real coefficient that returns the same type. Inexact
numpy scalars (``float``, ``complex``, ``np.float32`` ...) have all three
natively; composite types such as :class:`StereoSample` declare them by
implementing :class:`Sample`.
"""

import abc
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Dict, Sequence

import numpy as np

from .errors import SampleTypeError

log = logging.getLogger(__name__)


class Sample(abc.ABC):
    """
    Capability set of a composite sample type.

    Instances must be immutable values: a filter fills every empty history
    slot and starts every sum from the one object returned by ``zero()``.
    """

    @classmethod
    @abc.abstractmethod
    def zero(cls) -> "Sample":
        """Additive identity."""

    @abc.abstractmethod
    def __add__(self, other: "Sample") -> "Sample":
        ...

    @abc.abstractmethod
    def __mul__(self, coefficient: float) -> "Sample":
        ...


@dataclass(frozen=True)
class StereoSample(Sample):
    """Left/right pair filtered with the same taps on both channels."""
    left: float = 0.0
    right: float = 0.0

    @classmethod
    def zero(cls) -> "StereoSample":
        return cls(0.0, 0.0)

    def __add__(self, other):
        if not isinstance(other, StereoSample):
            return NotImplemented
        return StereoSample(self.left + other.left, self.right + other.right)

    def __mul__(self, coefficient):
        return StereoSample(self.left * coefficient, self.right * coefficient)

    __rmul__ = __mul__


# Names used in tap files and on the command line
SAMPLE_TYPES: Dict[str, type] = {
    "float16": np.float16,
    "float32": np.float32,
    "float64": np.float64,
    "complex64": np.complex64,
    "complex128": np.complex128,
    "stereo": StereoSample,
}


def sample_type_name(sample_type: type) -> str:
    """Inverse of ``SAMPLE_TYPES``; ``float`` and ``complex`` map to their 64-bit names."""
    if isinstance(sample_type, type) and issubclass(sample_type, Sample):
        for name, candidate in SAMPLE_TYPES.items():
            if candidate is sample_type:
                return name
        raise SampleTypeError(f"{sample_type.__name__} has no registered name")
    name = sample_kind(sample_type).dtype.name
    if name not in SAMPLE_TYPES:
        raise SampleTypeError(f"Sample type {name} has no registered name")
    return name


@dataclass(frozen=True)
class SampleKind:
    """Resolved sample type: storage dtype plus its zero value."""
    sample_type: type
    dtype: np.dtype
    zero: Any

    @property
    def composite(self) -> bool:
        return self.dtype == np.dtype(object)

    def allocate(self, size: int) -> np.ndarray:
        """Zero-filled storage of exactly ``size`` samples."""
        if self.composite:
            buf = np.empty(size, dtype=object)
            buf.fill(self.zero)
            return buf
        return np.zeros(size, dtype=self.dtype)

    def weights(self, coefficients: Sequence[float]) -> Sequence[float]:
        """
        Coefficients in the form the scaling operation expects.

        Real sample types get taps in their own precision so the arithmetic
        stays in that type; complex types get the matching real precision;
        composite types get plain Python floats.
        """
        if self.composite:
            return tuple(float(c) for c in coefficients)
        real = np.finfo(self.dtype).dtype
        return np.asarray(coefficients, dtype=real)


def sample_kind(sample_type: Any) -> SampleKind:
    """
    Resolve ``sample_type`` against the capability set.

    Raises
    ------
    SampleTypeError
        If the type is not an inexact numeric type and does not implement
        :class:`Sample`.
    """
    if isinstance(sample_type, type) and issubclass(sample_type, Sample):
        if inspect.isabstract(sample_type):
            raise SampleTypeError(f"{sample_type.__name__} is abstract")
        zero = getattr(sample_type, "zero", None)
        if not callable(zero):
            raise SampleTypeError(f"{sample_type.__name__} provides no zero()")
        return SampleKind(sample_type, np.dtype(object), zero())

    try:
        dtype = np.dtype(sample_type)
    except TypeError as e:
        raise SampleTypeError(f"Unsupported sample type: {sample_type!r}") from e

    if dtype.kind not in "fc":
        raise SampleTypeError(
            f"Sample type {dtype.name} cannot be scaled by a real coefficient "
            "without changing type"
        )
    log.debug("Resolved sample type %r to dtype %s", sample_type, dtype.name)
    return SampleKind(dtype.type, dtype, dtype.type(0))
