"""
Tests for combining realized filters in series and in parallel
"""

import numpy as np
import pytest

from dsp.interfaces import Connection, FilterKind
from dsp.filters import (
    IirFilter, FirFilter, FilterChain, TransferFunction, classify, realize, combine
)


class TestClassification:
    """Structure selection from the denominator length"""

    def test_classify(self):
        assert classify(TransferFunction([1, 0.5], [1.0])) is FilterKind.NON_RECURSIVE
        assert classify(TransferFunction([1.0], [1, -0.5])) is FilterKind.RECURSIVE

    def test_realize_fir_scales_by_constant_denominator(self):
        filt = realize(TransferFunction([2, 4], [2]))

        assert isinstance(filt, FirFilter)
        np.testing.assert_allclose(filt.b, [1, 2])

    def test_realize_iir_keeps_design_tf(self):
        tf = TransferFunction([1, 0.4], [1, -0.6])

        filt = realize(tf)

        assert type(filt) is IirFilter
        assert filt.tf is tf


class TestParallel:
    """Parallel connection (+)"""

    def test_iir_iir(self):
        f = IirFilter([1, -0.1], [1, 0.2]) + IirFilter([1, 0.4], [1, -0.6])

        assert type(f) is IirFilter
        np.testing.assert_allclose(f.tf.numerator, [2, -0.1, 0.14], atol=1e-7)
        np.testing.assert_allclose(f.tf.denominator, [1, -0.4, -0.12], atol=1e-7)

    def test_iir_fir(self):
        f = IirFilter([1, 0.4], [1, -0.6]) + FirFilter([1, -0.1])

        assert type(f) is IirFilter
        np.testing.assert_allclose(f.tf.numerator, [2, -0.3, 0.06], atol=1e-7)
        np.testing.assert_allclose(f.tf.denominator, [1, -0.6], atol=1e-7)

    def test_fir_iir(self):
        f = FirFilter([1, -0.1]) + IirFilter([1, 0.4], [1, -0.6])

        assert type(f) is IirFilter
        np.testing.assert_allclose(f.tf.numerator, [2, -0.3, 0.06], atol=1e-7)
        np.testing.assert_allclose(f.tf.denominator, [1, -0.6], atol=1e-7)

    def test_fir_fir(self):
        f = FirFilter([1, -0.1]) + FirFilter([1, -0.6])

        assert isinstance(f, FirFilter)
        assert f.kind is FilterKind.NON_RECURSIVE
        np.testing.assert_allclose(f.b, [2, -0.7], atol=1e-7)


class TestSeries:
    """Series connection (*)"""

    def test_iir_fir(self):
        f = IirFilter([1, -0.1], [1, 0.2]) * FirFilter([1, 0.4])

        assert type(f) is IirFilter
        np.testing.assert_allclose(f.tf.numerator, [1, 0.3, -0.04], atol=1e-7)
        np.testing.assert_allclose(f.tf.denominator, [1, 0.2], atol=1e-7)

    def test_fir_iir(self):
        f = FirFilter([1, -0.1]) * IirFilter([1, 0.4], [1, -0.6])

        np.testing.assert_allclose(f.tf.numerator, [1, 0.3, -0.04], atol=1e-7)
        np.testing.assert_allclose(f.tf.denominator, [1, -0.6], atol=1e-7)

    def test_series_output_equals_cascade(self, rng):
        f1 = IirFilter([0.3, 0.2], [1, -0.5], dtype=np.float64)
        f2 = FirFilter([1, -0.4, 0.1], dtype=np.float64)
        x = rng.standard_normal(128)

        combined = combine(f1, f2, Connection.SERIES)

        np.testing.assert_allclose(combined.apply_block(x), f2.apply_block(f1.apply_block(x)),
                                   rtol=1e-4, atol=1e-4)

    def test_parallel_output_equals_sum(self, rng):
        f1 = IirFilter([0.3, 0.2], [1, -0.5], dtype=np.float64)
        f2 = IirFilter([1.0], [1, 0.25], dtype=np.float64)
        x = rng.standard_normal(128)

        combined = combine(f1, f2, Connection.PARALLEL)

        np.testing.assert_allclose(combined.apply_block(x), f1.apply_block(x) + f2.apply_block(x),
                                   rtol=1e-4, atol=1e-4)


class TestOperands:
    """Combination never alters its inputs"""

    def test_operands_untouched(self):
        f1 = IirFilter([1, -0.1], [1, 0.2])
        f2 = FirFilter([1, 0.4])
        f1.process(1.0)

        _ = f1 * f2
        _ = f1 + f2

        np.testing.assert_allclose(f1.b, [1, -0.1])
        np.testing.assert_allclose(f1.a, [1, 0.2])
        np.testing.assert_allclose(f2.b, [1, 0.4])
        assert f1.process(0.0) == pytest.approx(-0.1 - 0.2, abs=1e-6)

    def test_combined_filter_starts_at_rest(self):
        f1 = IirFilter([1.0], [1, -0.5])
        f1.process(1.0)

        f = f1 * FirFilter([1.0])

        assert f.process(0.0) == 0.0

    def test_chain_participates_in_algebra(self):
        chain = FilterChain([FirFilter([1, -0.1]), IirFilter([1, 0.4], [1, -0.6])])

        f = chain + FirFilter([1.0])

        np.testing.assert_allclose(f.tf.numerator, [2, -0.3, -0.04], atol=1e-7)
        np.testing.assert_allclose(f.tf.denominator, [1, -0.6], atol=1e-7)

    def test_non_filter_operand(self):
        with pytest.raises(TypeError):
            IirFilter([1.0], [1, -0.5]) * 2.0
