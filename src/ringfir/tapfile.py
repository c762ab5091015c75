"""
Reading and writing coefficient tables.

Three formats are written side by side for each table:

- ``stem.txt``  one tap per line, ``%.18e``
- ``stem.npy``  raw tap array
- ``stem.npz``  ``taps`` array plus a JSON ``spec`` describing the filter

Only the ``.npz`` form carries enough to rebuild a filter type.
"""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np

from .coefficients import CoefficientTable
from .errors import TapCountError, TapFileError
from .ring_filter import define_filter
from .samples import SAMPLE_TYPES, sample_type_name

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


# ───────────────────────── Data structures ────────────────────────── #

@dataclass
class TapSpec:
    """Description of a concrete filter stored next to its taps."""
    name: str
    taps: int
    sample_type: str = "float64"
    symmetric: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'TapSpec':
        return cls(**d)


# ───────────────────────── save / load ────────────────────────── #

def save_table(table: CoefficientTable, stem: PathLike, sample_type=float) -> List[Path]:
    """
    Write ``table`` as ``stem.txt``, ``stem.npy`` and ``stem.npz``.

    Returns
    -------
    list of Path
        The written files, in that order.
    """
    stem = str(stem)
    spec = TapSpec(
        name=table.name,
        taps=table.size(),
        sample_type=sample_type_name(sample_type),
        symmetric=table.is_symmetric(),
    )
    taps = table.coefficients()

    txt = Path(stem + ".txt")
    npy = Path(stem + ".npy")
    npz = Path(stem + ".npz")

    np.savetxt(txt, taps, fmt="%.18e")
    np.save(npy, taps)
    np.savez(npz, taps=taps, spec=json.dumps(spec.to_dict()))

    log.info("Saved %s.txt, %s.npy, and %s.npz", stem, stem, stem)
    return [txt, npy, npz]


def _read_taps(path: Path) -> np.ndarray:
    suffix = path.suffix.lower()
    if suffix == ".txt":
        return np.atleast_1d(np.loadtxt(path, dtype=np.float64))
    if suffix == ".npy":
        return np.load(path)
    if suffix == ".npz":
        with np.load(path) as data:
            if "taps" not in data:
                raise TapFileError(f"{path} has no 'taps' array")
            return data["taps"]
    raise TapFileError(f"Unknown tap file format: {path.suffix or path.name}")


def load_spec(path: PathLike) -> TapSpec:
    """Filter description stored in an ``.npz`` tap file."""
    path = Path(path)
    if path.suffix.lower() != ".npz":
        raise TapFileError(f"Only .npz tap files carry a filter spec: {path}")
    with np.load(path) as data:
        if "spec" not in data:
            raise TapFileError(f"{path} has no 'spec' entry")
        try:
            spec = TapSpec.from_dict(json.loads(str(data["spec"])))
        except (ValueError, TypeError) as e:
            raise TapFileError(f"{path} has a malformed spec: {e}") from e
    return spec


def load_table(path: PathLike, name: Optional[str] = None) -> CoefficientTable:
    """
    Load a coefficient table from ``.txt``, ``.npy`` or ``.npz``.

    For ``.npz`` files the stored spec supplies the table name and its tap
    count is checked against the stored array.
    """
    path = Path(path)
    if not path.is_file():
        raise TapFileError(f"No such tap file: {path}")
    log.info("Loading taps from %s...", path)

    taps = _read_taps(path)
    size = None
    if path.suffix.lower() == ".npz":
        spec = load_spec(path)
        name = name or spec.name
        size = spec.taps
        if size != taps.size:
            raise TapCountError(f"{path}: spec declares {size} taps, file holds {taps.size}")

    return CoefficientTable(taps, size=size, name=name or path.stem)


def load_filter(path: PathLike) -> type:
    """Build a filter type from the spec and taps in an ``.npz`` file."""
    spec = load_spec(path)
    if spec.sample_type not in SAMPLE_TYPES:
        raise TapFileError(f"Unknown sample type in {path}: {spec.sample_type}")
    table = load_table(path)
    return define_filter(spec.name, SAMPLE_TYPES[spec.sample_type], spec.taps,
                         table.coefficients())
