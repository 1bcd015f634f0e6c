import pytest
import numpy as np

from chebcond.physics.thermal import fermi, fermi_derivative, fermidiff, FERMIDIFF_TOL

class TestFermi:

    def test_range_and_midpoint(self):
        x = np.linspace(-5, 5, 41)
        f = fermi(x, beta=3.0)
        assert np.all((f >= 0) & (f <= 1))
        assert np.isclose(fermi(0.0, beta=3.0), 0.5)
        assert np.isclose(fermi(0.7, beta=3.0, mu=0.7), 0.5)

    def test_large_beta_no_overflow(self):
        """The occupation is a step function at very low temperature."""
        with np.errstate(over="raise"):
            f = fermi(np.array([-1.0, 1.0]), beta=1e5)
        assert np.allclose(f, [1.0, 0.0])

    def test_derivative_matches_finite_difference(self):
        x, h    = np.linspace(-1, 1, 9), 1e-6
        fd      = (fermi(x + h, 4.0, 0.2) - fermi(x - h, 4.0, 0.2)) / (2 * h)
        assert np.allclose(fermi_derivative(x, 4.0, 0.2), fd, atol=1e-7)

class TestFermidiff:

    def test_symmetric(self):
        x = np.linspace(-1, 1, 7)
        F = fermidiff(x[:, None], x[None, :], beta=10.0)
        assert F.shape == (7, 7)
        assert np.allclose(F, F.T)

    def test_diagonal_is_derivative(self):
        x = np.linspace(-1, 1, 7)
        assert np.allclose(fermidiff(x, x, beta=10.0), fermi_derivative(x, 10.0))

    def test_continuous_across_tolerance(self):
        x1      = 0.3
        below   = fermidiff(x1, x1 + 0.5 * FERMIDIFF_TOL, beta=5.0)
        above   = fermidiff(x1, x1 + 2.0 * FERMIDIFF_TOL, beta=5.0)
        assert np.isclose(below, above, rtol=1e-6)

    def test_divided_difference(self):
        """Away from the diagonal the plain quotient is returned."""
        x1, x2  = -0.4, 0.6
        ref     = (fermi(x1, 2.0) - fermi(x2, 2.0)) / (x1 - x2)
        assert np.isclose(fermidiff(x1, x2, beta=2.0), ref)

    def test_nonpositive(self):
        x = np.linspace(-1, 1, 11)
        assert np.all(fermidiff(x[:, None], x[None, :], beta=20.0) <= 0)
