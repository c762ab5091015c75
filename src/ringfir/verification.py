#!/usr/bin/env python3
"""
Verification tools for ring filters.
"""

import logging
from typing import Any, Dict, Optional, Sequence

import numpy as np
from scipy import signal

from .coefficients import CoefficientTable
from .errors import SampleTypeError
from .ring_filter import RingFilter
from .samples import sample_kind

log = logging.getLogger(__name__)


def reference_output(table: CoefficientTable, samples: Sequence) -> np.ndarray:
    """
    Batch output of the same filter computed by ``scipy.signal.lfilter``.

    ``feed`` pairs the first tap with the oldest stored sample, so the
    equivalent direct-form numerator is the table reversed.
    """
    b = np.asarray(table.coefficients(), dtype=np.float64)[::-1]
    return signal.lfilter(b, [1.0], np.asarray(samples))


def impulse_response(table: CoefficientTable, sample_type=float) -> np.ndarray:
    """Outputs of a fresh filter fed a unit impulse followed by N-1 zeros."""
    ring = RingFilter(table, sample_type)
    kind = ring.kind
    if kind.composite:
        raise SampleTypeError("Impulse response needs a numeric sample type")
    impulse = np.zeros(table.size(), dtype=kind.dtype)
    impulse[0] = 1
    return np.array(ring.process(impulse), dtype=kind.dtype)


def verify_filter_output(
    table: CoefficientTable,
    samples: Sequence,
    sample_type=np.float64,
    rtol: float = 0.0,
    atol: Optional[float] = None,
    plot: bool = False
) -> Dict[str, Any]:
    """
    Run ``samples`` through a ring filter and compare with the reference.

    Parameters
    ----------
    table : CoefficientTable
        Taps under test
    samples : sequence
        Input signal
    sample_type : type
        Numeric sample type of the ring filter
    rtol : float
        Relative tolerance against the reference
    atol : float, optional
        Absolute tolerance. Defaults to a bound on sequential rounding
        error for the sample precision: 4 * N * eps * sum|taps| * max|x|
    plot : bool
        Whether to plot ring output against the reference

    Returns
    -------
    dict
        Verification results
    """
    kind = sample_kind(sample_type)
    if kind.composite:
        raise SampleTypeError("Reference comparison needs a numeric sample type")

    x = np.asarray(samples, dtype=kind.dtype)
    ring = RingFilter(table, sample_type)
    ours = np.array(ring.process(x), dtype=kind.dtype)
    if atol is None:
        peak = float(np.max(np.abs(x))) if x.size else 0.0
        scale = float(np.sum(np.abs(table.coefficients()))) * max(peak, 1.0)
        atol = 4 * table.size() * float(np.finfo(kind.dtype).eps) * scale
    ref = reference_output(table, x)

    err = np.abs(ours - ref)
    max_err = float(np.max(err)) if err.size else 0.0

    expected_impulse = table.coefficients()[::-1]
    impulse = impulse_response(table, sample_type)

    results = {
        'taps': table.size(),
        'samples': int(x.size),
        'max_abs_error': max_err,
        'matches_reference': bool(np.allclose(ours, ref, rtol=rtol, atol=atol)),
        'impulse_matches': bool(np.allclose(impulse, expected_impulse, rtol=rtol, atol=atol)),
        'symmetric': table.is_symmetric(),
    }

    log.info("Verification results for %s:", table.name)
    for key, value in results.items():
        log.info("  %s: %s", key, value)

    if plot:
        import matplotlib.pyplot as plt

        fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(10, 8))

        ax1.plot(np.real(ref), label='lfilter reference', linewidth=2)
        ax1.plot(np.real(ours), label='ring filter', linewidth=1, linestyle='--')
        ax1.set_xlabel('Sample')
        ax1.set_ylabel('Output')
        ax1.set_title(f'{table.name}: {table.size()} taps')
        ax1.grid(True, alpha=0.3)
        ax1.legend()

        ax2.plot(err)
        ax2.set_xlabel('Sample')
        ax2.set_ylabel('|error|')
        ax2.set_title(f'Absolute error (max {max_err:.2e})')
        ax2.grid(True, alpha=0.3)

        plt.tight_layout()
        plt.show()

    return results
