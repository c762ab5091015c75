#!/usr/bin/env python3
"""
Tests for the ring-buffer convolution engine.
"""

import numpy as np
import pytest

from ringfir import (CoefficientTable, FilterError, RingFilter, SampleTypeError,
                     StereoSample, TapCountError, define_filter)

SparseFIR = define_filter("SparseFIR", float, 4, [1.0, 0.0, 2.0, 0.0])
AsymmetricFIR = define_filter("AsymmetricFIR", float, 5, [0.5, -1.25, 3.0, 0.75, 2.0])


def test_fir():
    f = SparseFIR()

    outputs = [f.feed(x) for x in [100.0, 200.0, 300.0, 400.0, 0.0, 0.0, 0.0, 0.0]]
    assert outputs == [0.0, 200.0, 400.0, 700.0, 1000.0, 300.0, 400.0, 0.0]

    assert f.feed(0.0) == 0.0
    assert f.feed(100.0) == 0.0
    assert f.feed(200.0) == 200.0
    assert f.feed(300.0) == 400.0
    assert f.feed(400.0) == 700.0

    assert list(f.history()) == [100.0, 200.0, 300.0, 400.0]


def test_warm_up_uses_last_tap():
    f = AsymmetricFIR()
    assert f.feed(4.0) == 2.0 * 4.0


def test_impulse_walks_table_backwards():
    a = 3.0
    f = AsymmetricFIR()
    taps = AsymmetricFIR.table.coefficients()
    n = len(taps)

    outputs = f.process([a] + [0.0] * n)

    for k in range(n):
        assert outputs[k] == taps[n - 1 - k] * a
    assert outputs[n] == 0.0


def test_superposition():
    rng = np.random.default_rng(7)
    s1 = rng.standard_normal(40)
    s2 = rng.standard_normal(40)

    y1 = AsymmetricFIR().process(s1)
    y2 = AsymmetricFIR().process(s2)
    y12 = AsymmetricFIR().process(s1 + s2)

    np.testing.assert_allclose(y12, np.add(y1, y2), rtol=1e-12, atol=1e-12)


def test_history_before_and_after_fill():
    f = SparseFIR()
    assert list(f.history()) == [0.0, 0.0, 0.0, 0.0]

    f.feed(1.0)
    f.feed(2.0)
    assert list(f.history()) == [0.0, 0.0, 1.0, 2.0]

    fed = [float(i) for i in range(3, 14)]
    for x in fed:
        f.feed(x)
    assert list(f.history()) == fed[-4:]


def test_history_segments():
    f = SparseFIR()
    for x in [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]:
        f.feed(x)

    older, newer = f.history_segments()
    assert f.cursor == 2
    assert older.tolist() == [3.0, 4.0]
    assert newer.tolist() == [5.0, 6.0]

    with pytest.raises(ValueError):
        older[0] = 0.0


def test_history_iterator_is_single_pass():
    f = SparseFIR()
    f.feed(1.0)
    it = f.history()
    assert len(list(it)) == 4
    assert list(it) == []


def test_cursor_wraps():
    f = SparseFIR()
    assert f.cursor == 0
    for k in range(1, 11):
        f.feed(float(k))
        assert f.cursor == k % 4
        assert 0 <= f.cursor < f.size


def test_sum_follows_coefficient_order():
    # Order matters at this magnitude: 1e16 + 1.0 rounds back to 1e16.
    f = RingFilter([1.0, 1.0, 1.0, 1.0])
    outputs = f.process([0.0, 0.0, 1e16, 1.0, -1e16, 1.0])

    assert f.cursor == 2
    assert outputs[-1] == 1.0


def test_reset():
    f = SparseFIR()
    f.process([1.0, 2.0, 3.0])
    f.reset()
    assert f.cursor == 0
    assert list(f.history()) == [0.0] * 4
    assert f.feed(100.0) == 0.0


def test_single_tap():
    f = RingFilter([0.5])
    assert f.process([2.0, 4.0, -8.0]) == [1.0, 2.0, -4.0]
    assert f.cursor == 0


def test_float32_stays_float32():
    Fir32 = define_filter("Fir32", np.float32, 4, [1.0, 0.0, 2.0, 0.0])
    f = Fir32()
    outputs = f.process(np.array([100, 200, 300, 400], dtype=np.float32))
    assert all(isinstance(y, np.float32) for y in outputs)
    assert [float(y) for y in outputs] == [0.0, 200.0, 400.0, 700.0]


def test_complex_samples():
    f = RingFilter(SparseFIR.table, complex)
    outputs = f.process([1 + 1j, 2 - 1j, 0j, 0j])
    assert outputs == [0j, 2 + 2j, 4 - 2j, 1 + 1j]


def test_stereo_samples_filter_each_channel():
    Stereo = define_filter("Stereo", StereoSample, 4, [1.0, 0.0, 2.0, 0.0])
    left = [100.0, 200.0, 300.0, 400.0, 0.0, 0.0]
    right = [-1.0, 0.5, 0.0, 8.0, 2.0, 0.0]

    out = Stereo().process(StereoSample(lt, rt) for lt, rt in zip(left, right))

    assert [s.left for s in out] == SparseFIR().process(left)
    assert [s.right for s in out] == SparseFIR().process(right)
    assert list(Stereo().history()) == [StereoSample.zero()] * 4


def test_define_filter():
    assert SparseFIR.__name__ == "SparseFIR"
    assert issubclass(SparseFIR, RingFilter)
    assert SparseFIR.table.size() == 4
    assert SparseFIR.table.name == "SparseFIR"

    storage = SparseFIR.storage()
    assert storage.shape == (4,)
    assert not storage.any()

    a, b = SparseFIR(), SparseFIR()
    a.feed(100.0)
    assert list(b.history()) == [0.0] * 4
    assert a.table is b.table


def test_define_filter_rejects_bad_tap_count():
    with pytest.raises(TapCountError):
        define_filter("Short", float, 4, [1.0, 2.0, 3.0])
    with pytest.raises(TapCountError):
        define_filter("Empty", float, 0, [])


def test_define_filter_rejects_int_samples():
    with pytest.raises(SampleTypeError):
        define_filter("IntFIR", int, 2, [1.0, 1.0])


def test_unbound_filter():
    with pytest.raises(FilterError):
        RingFilter()
    with pytest.raises(FilterError):
        RingFilter.storage()


def test_plain_sequence_becomes_table():
    f = RingFilter([1.0, 2.0])
    assert isinstance(f.table, CoefficientTable)
    assert repr(f) == "RingFilter(taps=2, cursor=0)"
