r"""
Separable Chebyshev approximation of the conductivity function.

The Kubo-Greenwood conductivity of a non-interacting system is a trace
$$
\sigma = \frac{1}{N} \mathrm{Tr}\left[ F(H, H) \right], \qquad
F(x_1, x_2) = \frac{f(x_1) - f(x_2)}{x_1 - x_2} \frac{1}{x_1 - x_2 + \eta},
$$
with f the Fermi-Dirac function. Close to the real axis F has the poles of f
at $x = \mu + i\pi(2k-1)/\beta$, which make a plain Chebyshev expansion slow
for large $\beta$. The ansatz
$$
F(x_1, x_2) \approx p(x_1, x_2)\, q(x_1)\, q(x_2)
$$
moves these poles into the one-dimensional factor q (a polynomial
interpolant of a rational function with the same poles), leaving a core p
that converges at the rate set by $\eta$ alone, $|\rho(\eta/2)|^{-2n}$, and
whose coefficient matrix decays away from its diagonal.

File    : chebcond/physics/response/approximation.py
Author  : Maksymilian Kliczkowski
Email   : maksymilian.kliczkowski@pwr.edu.pl
"""

from typing import Callable, Optional, Tuple, Union
import numpy as np

from ...algebra.utils import Array
from ...algebra.chebyshev import (
    ChebyshevSeries, ChebyshevSeries2D,
    chebyshev_interpolate, chebyshev_interpolate_2d,
)
from ..thermal import fermidiff

# =============================================================================
# Bernstein ellipses
# =============================================================================

def inverse_joukowski(z: Union[complex, Array]) -> Union[complex, Array]:
    r"""
    Inverse of the Joukowski map $J(w) = (w + 1/w)/2$ on the branch $|w| \geq 1$.

    $w = z + \sqrt{z - 1}\sqrt{z + 1}$; $|w|$ is the parameter $\rho$ of the
    Bernstein ellipse through z.
    """
    z = np.asarray(z, dtype=complex)
    w = z + np.sqrt(z - 1) * np.sqrt(z + 1)
    w = np.where(np.abs(w) < 1, 1 / w, w)
    return w[()] if w.ndim == 0 else w

def semiminor(z: Union[complex, float]) -> float:
    r"""
    Semi-minor axis $b = (\rho - 1/\rho)/2$ of the Bernstein ellipse through z.
    """
    rho = abs(inverse_joukowski(z))
    return float((rho - 1 / rho) / 2)

def nfermipoles(b: float, beta: float) -> int:
    r"""
    Number of poles $i\pi(2k-1)/\beta$, $k \geq 1$, of the Fermi-Dirac function
    with imaginary part strictly below b.
    """
    if beta <= 0:
        raise ValueError(f"Inverse temperature must be positive, got {beta}.")
    s = b * beta / np.pi
    return max(0, int(np.ceil((s - 1) / 2)))

def theoretical_rate(eta: complex, n: Union[int, Array]) -> Union[float, Array]:
    r"""
    Predicted relative error $|\rho(\eta/2)|^{-2n}$ of the degree-n approximation.
    """
    return np.abs(inverse_joukowski(eta / 2)) ** (-2 * np.asarray(n, dtype=float))

# =============================================================================
# Target function and factors
# =============================================================================

def conductivity_function(beta: float, eta: complex, mu: float = 0.0) -> Callable:
    r"""
    $F(x_1, x_2) = \mathrm{fermidiff}(x_1, x_2) / (x_1 - x_2 + \eta)$.

    The returned callable broadcasts over its arguments. For real eta the
    function is singular on the line $x_1 - x_2 = -\eta$.
    """
    def f(x1, x2):
        x1, x2 = np.broadcast_arrays(np.asarray(x1), np.asarray(x2))
        return fermidiff(x1, x2, beta, mu) / (x1 - x2 + eta)
    return f

def rationalfactor(beta: float, eta: complex) -> Callable:
    r"""
    One-dimensional function with simple poles at all the singularities of
    the Fermi-Dirac function inside the Bernstein ellipse through $1 + \eta$,
    $$
    r(x) = \frac{(x^2 + b^2)^k}{\prod_{j=1}^{k} \left(x^2 + (\pi(2j-1)/\beta)^2\right)},
    $$
    with b the semi-minor axis of that ellipse and k the number of poles in it.
    The numerator keeps r bounded at infinity.
    """
    b       = semiminor(1 + eta)
    k       = nfermipoles(b, beta)
    poles   = np.pi / beta * np.arange(1, 2 * k, 2)

    def r(x):
        x2  = np.asarray(x) ** 2
        out = np.ones_like(x2, dtype=float) * (x2 + b ** 2) ** k
        for p in poles:
            out = out / (x2 + p ** 2)
        return out
    return r

# =============================================================================
# Semiseparated approximation
# =============================================================================

class SemiseparatedApproximation:
    r'''
    $F(x_1, x_2) \approx p(x_1, x_2)\, q_1(x_1)\, q_2(x_2)$.

    Attributes:
        core (ChebyshevSeries2D):
            The two-dimensional polynomial p, coefficients `C`.
        factors (Tuple[ChebyshevSeries, ChebyshevSeries]):
            The one-dimensional factors.
        npoly (Optional[int]):
            Number of nodes per dimension used to build the core.
        nrat (Optional[int]):
            Number of nodes used to build the factors.
    '''

    def __init__(self,
                core    : ChebyshevSeries2D,
                factors : Tuple[ChebyshevSeries, ChebyshevSeries],
                npoly   : Optional[int] = None,
                nrat    : Optional[int] = None):
        if len(factors) != 2:
            raise ValueError("A semiseparated approximation needs exactly two factors.")
        self.core       = core
        self.factors    = tuple(factors)
        self.npoly      = npoly
        self.nrat       = nrat

    @property
    def coefficients(self) -> np.ndarray:
        return self.core.coefficients

    @property
    def degree(self) -> int:
        '''Number of Chebyshev terms per dimension of the core.'''
        return self.core.shape[0]

    @property
    def symmetric(self) -> bool:
        '''True if both sides share the same factor.'''
        q1, q2 = self.factors
        return q1 is q2 or q1 == q2

    def __call__(self, x1, x2):
        q1, q2 = self.factors
        return q1(x1) * q2(x2) * self.core(x1, x2)

    def grideval(self, x1: Array, x2: Array) -> np.ndarray:
        '''out[i, j] = q1(x1[i]) q2(x2[j]) p(x1[i], x2[j]).'''
        q1, q2  = self.factors
        x1, x2  = np.asarray(x1), np.asarray(x2)
        return q1(x1)[:, np.newaxis] * self.core.grid(x1, x2) * q2(x2)[np.newaxis, :]

    def __repr__(self) -> str:
        return f"SemiseparatedApproximation(core={self.core!r}, factors={self.factors!r})"

def approx_conductivity(beta: float, eta: complex, npoly: int, nrat: int, mu: float = 0.0) -> SemiseparatedApproximation:
    r"""
    Approximate the conductivity function with the ansatz
    $F(x_1, x_2) \approx p(x_1, x_2) q(x_1) q(x_2)$, where q is the
    polynomial interpolant of `rationalfactor(beta, eta)` and p the polynomial
    interpolant of the remainder $F / (q \otimes q)$.

    Parameters
    ----------
    beta : float
        Inverse temperature, beta > 0.
    eta : complex
        Pole offset of $1/(x_1 - x_2 + \eta)$; typically imaginary.
    npoly : int
        Number of Chebyshev nodes per dimension of the core p.
    nrat : int
        Number of Chebyshev nodes of the factor q.
    mu : float, optional
        Chemical potential (default: 0). The rational factor is built for mu = 0.

    Returns
    -------
    SemiseparatedApproximation
        With both factors the same object, core coefficients of shape (npoly, npoly).

    Examples
    --------
    >>> f = approx_conductivity(beta=10.0, eta=0.1j, npoly=80, nrat=80)
    >>> f.coefficients.shape
    (80, 80)
    """
    if beta <= 0:
        raise ValueError(f"Inverse temperature must be positive, got {beta}.")
    if npoly < 1 or nrat < 1:
        raise ValueError(f"Degrees must be positive, got npoly={npoly}, nrat={nrat}.")

    q       = chebyshev_interpolate(rationalfactor(beta, eta), nrat)
    F       = conductivity_function(beta, eta, mu)
    p       = chebyshev_interpolate_2d(lambda x1, x2: F(x1, x2) / (q(x1) * q(x2)), npoly)
    return SemiseparatedApproximation(p, (q, q), npoly=npoly, nrat=nrat)

# =============================================================================
# Diagnostics
# =============================================================================

def relative_error(f: Callable, approx: SemiseparatedApproximation, npoints: int = 257) -> float:
    r"""
    Relative error $\|F - \tilde F\| / \|F\|$ (Frobenius norm on a uniform
    npoints x npoints grid of [-1, 1]^2).
    """
    x       = np.linspace(-1, 1, npoints)
    exact   = f(x[:, np.newaxis], x[np.newaxis, :])
    approx  = approx.grideval(x, x)
    return float(np.linalg.norm(exact - approx) / np.linalg.norm(exact))

def band_profile(coefficients: Array) -> np.ndarray:
    r"""
    Largest coefficient magnitude on every diagonal offset,
    out[d] = max_{|i1 - i2| = d} |C[i1, i2]| / max |C|.

    Used to choose a bandwidth for the windowed evaluator.
    """
    C       = np.abs(np.asarray(coefficients))
    n       = min(C.shape)
    scale   = C.max() if C.size and C.max() > 0 else 1.0
    out     = np.empty(n)
    for d in range(n):
        out[d] = max(np.diagonal(C, d).max(), np.diagonal(C, -d).max())
    return out / scale

# =============================================================================
#! End of file
# =============================================================================
