"""
ringfir - FIR filtering over a fixed-capacity ring buffer of samples.
"""

from .coefficients import CoefficientTable
from .errors import (FilterError, SampleTypeError, SymmetryError,
                     TapCountError, TapFileError)
from .ring_filter import RingFilter, define_filter
from .samples import SAMPLE_TYPES, Sample, StereoSample, sample_kind
from .tapfile import TapSpec, load_filter, load_table, save_table
from .verification import impulse_response, reference_output, verify_filter_output

__version__ = "0.1.0"
__all__ = [
    "CoefficientTable",
    "RingFilter",
    "define_filter",
    "Sample",
    "StereoSample",
    "SAMPLE_TYPES",
    "sample_kind",
    "TapSpec",
    "load_filter",
    "load_table",
    "save_table",
    "impulse_response",
    "reference_output",
    "verify_filter_output",
    "FilterError",
    "SampleTypeError",
    "SymmetryError",
    "TapCountError",
    "TapFileError",
]
