"""
chebcond/physics/thermal.py

Fermi-Dirac occupation and its divided differences.

Provides:
- Fermi-Dirac function f(x) = 1 / (1 + exp(beta (x - mu)))
- Its derivative
- The divided difference (f(x1) - f(x2)) / (x1 - x2), which is the thermal
  factor of the Kubo-Greenwood conductivity

Author      : Maksymilian Kliczkowski
Email       : maksymilian.kliczkowski@pwr.edu.pl
"""

import numpy as np
from scipy.special import expit

from ..algebra.utils import Array

# Below this separation the divided difference is replaced by the derivative
# at the midpoint; the error is O(dx^2) there, the cancellation error O(eps/dx) above.
FERMIDIFF_TOL = 1e-7

# =============================================================================
# Fermi-Dirac function
# =============================================================================

def fermi(x: Array, beta: float, mu: float = 0.0) -> Array:
    r"""
    Fermi-Dirac function $f(x) = 1 / (1 + e^{\beta (x - \mu)})$.

    Parameters
    ----------
    x : array-like
        Energies.
    beta : float
        Inverse temperature.
    mu : float, optional
        Chemical potential (default: 0).

    Returns
    -------
    Array
        Occupations in [0, 1], overflow-free for large beta.
    """
    return expit(-beta * (np.asarray(x) - mu))

def fermi_derivative(x: Array, beta: float, mu: float = 0.0) -> Array:
    r"""
    Derivative $f'(x) = -\beta f(x) (1 - f(x))$.
    """
    z = beta * (np.asarray(x) - mu)
    return -beta * expit(z) * expit(-z)

def fermidiff(x1: Array, x2: Array, beta: float, mu: float = 0.0) -> Array:
    r"""
    Divided difference of the Fermi-Dirac function,
    $$
    \frac{f(x_1) - f(x_2)}{x_1 - x_2},
    $$
    continued by $f'((x_1 + x_2)/2)$ where $|x_1 - x_2|$ is below `FERMIDIFF_TOL`.

    Parameters
    ----------
    x1, x2 : array-like
        Real energies, broadcast against each other.
    beta : float
        Inverse temperature.
    mu : float, optional
        Chemical potential (default: 0).

    Returns
    -------
    Array
        Divided differences, shape of the broadcast inputs.

    Examples
    --------
    >>> x = np.linspace(-1, 1, 5)
    >>> F = fermidiff(x[:, None], x[None, :], beta=10.0)
    """
    x1, x2  = np.broadcast_arrays(np.asarray(x1, dtype=float), np.asarray(x2, dtype=float))
    dx      = x1 - x2
    close   = np.abs(dx) < FERMIDIFF_TOL
    safe_dx = np.where(close, 1.0, dx)
    out     = (fermi(x1, beta, mu) - fermi(x2, beta, mu)) / safe_dx
    return np.where(close, fermi_derivative(0.5 * (x1 + x2), beta, mu), out)

# =============================================================================
#! End of file
# =============================================================================
