import pytest
import numpy as np

from chebcond.algebra.chebyshev import ChebyshevSeries, chebyshev_interpolate
from chebcond.physics.response.approximation import (
    SemiseparatedApproximation,
    approx_conductivity, conductivity_function, rationalfactor,
    semiminor, nfermipoles, inverse_joukowski, theoretical_rate,
    relative_error, band_profile,
)

BETA    = 5.0
ETA     = 0.5j

class TestBernsteinEllipse:

    def test_inverse_joukowski_inverts(self):
        z = np.array([2.0, 1 + 0.5j, -0.3 + 0.2j, 0.1j])
        w = inverse_joukowski(z)
        assert np.all(np.abs(w) >= 1)
        assert np.allclose((w + 1 / w) / 2, z)

    def test_semiminor_known_values(self):
        assert np.isclose(semiminor(2.0), np.sqrt(3.0))
        assert np.isclose(semiminor(0.7j), 0.7)
        assert np.isclose(semiminor(-0.7j), 0.7)

    def test_semiminor_on_interval(self):
        """Points of [-1, 1] lie on the degenerate ellipse."""
        assert np.isclose(semiminor(0.5), 0.0, atol=1e-12)

    def test_nfermipoles(self):
        # poles at pi (2k - 1) / beta
        assert nfermipoles(4.0, np.pi) == 2
        assert nfermipoles(0.5, np.pi) == 0
        assert nfermipoles(2.5, np.pi) == 1
        assert nfermipoles(0.0, 10.0) == 0

    def test_nfermipoles_invalid_beta(self):
        with pytest.raises(ValueError):
            nfermipoles(1.0, 0.0)

    def test_theoretical_rate_decreases(self):
        rates = theoretical_rate(0.1j, np.arange(1, 50, 10))
        assert np.all(np.diff(rates) < 0)
        assert np.isclose(theoretical_rate(0.1j, 0), 1.0)

class TestRationalFactor:

    def test_positive_and_bounded(self):
        r = rationalfactor(BETA, ETA)
        x = np.linspace(-1, 1, 201)
        v = r(x)
        assert np.all(v > 0)
        assert np.all(np.isfinite(v))

    def test_no_poles_gives_constant(self):
        """At high temperature no Fermi pole lies inside the ellipse."""
        b = semiminor(1 + ETA)
        assert nfermipoles(b, 1.0) == 0
        assert np.allclose(rationalfactor(1.0, ETA)(np.linspace(-1, 1, 5)), 1.0)

    def test_matches_closed_form(self):
        b   = semiminor(1 + ETA)
        k   = nfermipoles(b, BETA)
        assert k == 1
        x   = np.array([-0.4, 0.0, 0.9])
        ref = (x ** 2 + b ** 2) / (x ** 2 + (np.pi / BETA) ** 2)
        assert np.allclose(rationalfactor(BETA, ETA)(x), ref)

class TestApproxConductivity:

    def setup_method(self):
        self.f      = approx_conductivity(BETA, ETA, 60, 60)
        self.exact  = conductivity_function(BETA, ETA)

    def test_shapes_and_shared_factor(self):
        assert self.f.coefficients.shape == (60, 60)
        assert self.f.degree == 60
        assert self.f.npoly == 60 and self.f.nrat == 60
        q1, q2 = self.f.factors
        assert q1 is q2
        assert self.f.symmetric

    def test_accuracy(self):
        assert relative_error(self.exact, self.f) < 1e-8

    def test_more_nodes_is_better(self):
        coarse = approx_conductivity(BETA, ETA, 20, 20)
        assert relative_error(self.exact, self.f) < relative_error(self.exact, coarse)

    def test_pointwise_matches_grid(self):
        x1      = np.array([-0.8, 0.1, 0.5])
        x2      = np.array([0.3, -0.2, 0.9])
        grid    = self.f.grideval(x1, x2)
        assert np.allclose(np.diag(grid), self.f(x1, x2))

    def test_pointwise_close_to_exact(self):
        x1, x2 = 0.2, -0.35
        assert np.isclose(self.f(x1, x2), self.exact(x1, x2), rtol=1e-7)

    def test_nonzero_chemical_potential(self):
        f = approx_conductivity(BETA, ETA, 60, 60, mu=0.1)
        assert relative_error(conductivity_function(BETA, ETA, mu=0.1), f) < 1e-6

    @pytest.mark.parametrize("beta, npoly, nrat", [(0.0, 10, 10), (-1.0, 10, 10), (1.0, 0, 10), (1.0, 10, 0)])
    def test_invalid_arguments(self, beta, npoly, nrat):
        with pytest.raises(ValueError):
            approx_conductivity(beta, ETA, npoly, nrat)

class TestSemiseparatedApproximation:

    def test_distinct_factors_not_symmetric(self):
        f   = approx_conductivity(BETA, ETA, 8, 8)
        q   = f.factors[0]
        qq  = ChebyshevSeries(q.coefficients * 2)
        g   = SemiseparatedApproximation(f.core, (q, qq))
        assert not g.symmetric

    def test_equal_factors_are_symmetric(self):
        f   = approx_conductivity(BETA, ETA, 8, 8)
        q   = f.factors[0]
        g   = SemiseparatedApproximation(f.core, (q, ChebyshevSeries(q.coefficients.copy())))
        assert g.symmetric

    def test_needs_two_factors(self):
        f = approx_conductivity(BETA, ETA, 8, 8)
        with pytest.raises(ValueError):
            SemiseparatedApproximation(f.core, (f.factors[0],))

class TestBandProfile:

    def test_hand_made(self):
        C = np.array([[4.0, 2.0, 0.0],
                      [-1.0, 1.0, 0.5],
                      [0.25, 0.0, 3.0]])
        assert np.allclose(band_profile(C), [1.0, 0.5, 0.0625])

    def test_conductivity_coefficients(self):
        f       = approx_conductivity(BETA, ETA, 60, 60)
        profile = band_profile(f.coefficients)
        assert profile.shape == (60,)
        assert np.isclose(profile.max(), 1.0)
        assert profile[-1] < profile[0]
