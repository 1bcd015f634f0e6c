"""
Test suite for Chebyshev interpolation, series and spectral rescaling.
"""

import numpy as np
import pytest
import scipy.sparse as sps
from scipy.sparse.linalg import aslinearoperator

from chebcond.algebra.chebyshev import (
    ChebyshevSeries, ChebyshevSeries2D,
    chebyshev_nodes, chebyshev_coefficients,
    chebyshev_interpolate, chebyshev_interpolate_2d,
    rescale_operator, spectral_bounds,
)

# ----------------------------------
#! Helper functions
# ----------------------------------

def create_hermitian_matrix(n, scale=3.0, seed=7):
    rng = np.random.default_rng(seed)
    A   = rng.standard_normal((n, n))
    return scale * 0.5 * (A + A.T)

def dense_matrix_function(H, func):
    E, U = np.linalg.eigh(H)
    return (U * func(E)[np.newaxis, :]) @ U.conj().T

# ----------------------------------
#! Test classes
# ----------------------------------

class TestNodesAndCoefficients:

    def test_nodes_inside_interval(self):
        x = chebyshev_nodes(9)
        assert x.shape == (9,)
        assert np.all(np.abs(x) < 1)
        assert np.all(np.diff(x) < 0)

    def test_nodes_invalid(self):
        with pytest.raises(ValueError):
            chebyshev_nodes(0)

    def test_constant(self):
        c = chebyshev_coefficients(np.full(5, 3.0))
        assert np.allclose(c, [3.0, 0, 0, 0, 0])

    def test_polynomial_is_reproduced(self):
        # 2 T_0 - T_1 + 0.5 T_3 is reproduced exactly by 6 nodes
        target  = np.array([2.0, -1.0, 0.0, 0.5, 0.0, 0.0])
        q       = chebyshev_interpolate(lambda x: np.polynomial.chebyshev.chebval(x, target), 6)
        assert np.allclose(q.coefficients, target, atol=1e-14)

    def test_complex_function(self):
        q = chebyshev_interpolate(lambda x: np.exp(1j * x), 30)
        x = np.linspace(-1, 1, 101)
        assert np.iscomplexobj(q.coefficients)
        assert np.allclose(q(x), np.exp(1j * x), atol=1e-13)

    def test_smooth_function_converges(self):
        f   = lambda x: 1.0 / (1.0 + 4 * x ** 2)
        x   = np.linspace(-1, 1, 201)
        e20 = np.max(np.abs(chebyshev_interpolate(f, 20)(x) - f(x)))
        e80 = np.max(np.abs(chebyshev_interpolate(f, 80)(x) - f(x)))
        assert e80 < e20
        assert e80 < 1e-10

class TestChebyshevSeries2D:

    def test_separable_product(self):
        f   = lambda x1, x2: np.cos(x1) * np.exp(x2)
        p   = chebyshev_interpolate_2d(f, (20, 25))
        assert p.shape == (20, 25)
        x   = np.linspace(-1, 1, 11)
        assert np.allclose(p.grid(x, x), f(x[:, None], x[None, :]), atol=1e-12)

    def test_pointwise_broadcast(self):
        p   = chebyshev_interpolate_2d(lambda x1, x2: x1 * x2 + x2 ** 2, 4)
        x1  = np.array([0.1, -0.3, 0.7])
        assert np.allclose(p(x1, 0.5), x1 * 0.5 + 0.25)

    def test_symmetric_function_gives_symmetric_coefficients(self):
        p = chebyshev_interpolate_2d(lambda x1, x2: 1.0 / (3.0 + x1 + x2), 16)
        assert np.allclose(p.coefficients, p.coefficients.T, atol=1e-14)

    def test_invalid(self):
        with pytest.raises(ValueError):
            ChebyshevSeries2D(np.zeros(3))

class TestChebyshevSeriesApply:

    def setup_method(self):
        self.H, _   = rescale_operator(create_hermitian_matrix(10))
        rng         = np.random.default_rng(3)
        self.v      = rng.standard_normal(10)
        self.q      = chebyshev_interpolate(lambda x: np.exp(-x) / (2 + x), 40)

    def test_apply_matches_matrix_function(self):
        ref = dense_matrix_function(self.H, lambda E: np.exp(-E) / (2 + E)) @ self.v
        assert np.allclose(self.q.apply(self.H, self.v), ref, atol=1e-12)

    def test_call_with_vector_applies(self):
        assert np.allclose(self.q(self.H, self.v), self.q.apply(self.H, self.v))

    def test_sparse_operator(self):
        out = self.q.apply(sps.csr_matrix(self.H), self.v)
        assert np.allclose(out, self.q.apply(self.H, self.v))

    def test_equality(self):
        c = self.q.coefficients.copy()
        assert ChebyshevSeries(c) == self.q
        assert ChebyshevSeries(c[:-1]) != self.q
        assert ChebyshevSeries(c + 1e-3) != self.q

    def test_invalid(self):
        with pytest.raises(ValueError):
            ChebyshevSeries(np.array([]))

class TestRescale:

    def test_dense(self):
        H           = create_hermitian_matrix(12)
        Ht, (a, b)  = rescale_operator(H, eps=0.1)
        E           = np.linalg.eigvalsh(Ht)
        assert E.min() >= -1 + 0.05 - 1e-12
        assert E.max() <= 1 - 0.05 + 1e-12
        assert np.allclose(a * Ht + b * np.eye(12), H)

    def test_sparse_keeps_format(self):
        H           = sps.random(40, 40, density=0.2, random_state=5)
        H           = (H + H.T).tocsr()
        Ht, (a, b)  = rescale_operator(H, bounds=spectral_bounds(H.toarray()))
        assert sps.issparse(Ht)
        assert np.max(np.abs(np.linalg.eigvalsh(Ht.toarray()))) < 1

    def test_linear_operator(self):
        H           = create_hermitian_matrix(8)
        bounds      = spectral_bounds(H)
        Ht, _       = rescale_operator(aslinearoperator(H), bounds=bounds)
        Hd, _       = rescale_operator(H, bounds=bounds)
        v           = np.arange(8.0)
        assert np.allclose(Ht.matvec(v), Hd @ v)

    def test_single_eigenvalue(self):
        with pytest.raises(ValueError):
            rescale_operator(2.0 * np.eye(4))

# -------------------------------------------------------------------
#! End of file
# -------------------------------------------------------------------
