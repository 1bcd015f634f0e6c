"""
chebcond/physics/response/examples/conductivity_examples.py

Diagnostics for the banded Chebyshev conductivity evaluation.

Run this file to see:
  1. Convergence of the separable approximation with the polynomial degree
  2. Decay of the core coefficients away from the diagonal
  3. Windowed evaluation vs. dense diagonalisation for growing bandwidth

Plots are saved in the current working directory.

Author: Maksymilian Kliczkowski
"""

import os
import numpy as np
import matplotlib
import matplotlib.pyplot as plt
from matplotlib import colors as mplcolors

from chebcond.common.flog import get_global_logger
from chebcond.algebra.chebyshev import rescale_operator
from chebcond.physics.response import (
    approx_conductivity, conductivity_function, relative_error, theoretical_rate,
    band_profile, eval_sparse_approx, eval_diag,
)

logger = get_global_logger()

# =============================================================================
# EXAMPLE 1: Convergence of the approximation
# =============================================================================

def example_1_convergence(beta: float = 100.0, degrees=range(1, 602, 50)):
    """
    Relative error of p(x1,x2) q(x1) q(x2) against the conductivity function,
    together with the theoretical rate |rho(eta/2)|^(-2n).
    """
    logger.title("EXAMPLE 1: convergence", 50, '=')
    eta     = 1j / beta
    f       = conductivity_function(beta, eta)
    degrees = np.asarray(list(degrees))
    err     = []
    for n in degrees:
        err.append(relative_error(f, approx_conductivity(beta, eta, n, n)))
        logger.info(f"n={n:5d}, relative error={err[-1]:.3e}", lvl=1)

    fig, ax = plt.subplots(figsize=(6, 4.5))
    try:
        ax.semilogy(degrees, err, label="relative error")
        ax.semilogy(degrees, theoretical_rate(eta, degrees), "k--", label="theoretical convergence rate")
        ax.set_xlabel("polynomial degree")
        ax.legend(loc="best")
        fig.savefig("convergence.png")
        logger.info(f"Plot saved at {os.getcwd()}/convergence.png", lvl=1)
    finally:
        plt.close(fig)

# =============================================================================
# EXAMPLE 2: Coefficient decay
# =============================================================================

def example_2_coefficients(beta: float = 100.0, n: int = 601):
    """
    |C| normalised to its maximum, on a logarithmic colour scale, and the
    largest magnitude on every diagonal offset.
    """
    logger.title("EXAMPLE 2: coefficients", 50, '=')
    f       = approx_conductivity(beta, 1j / beta, n, n)
    C       = np.abs(f.coefficients)
    C      /= C.max()
    profile = band_profile(f.coefficients)
    for tol in (1e-4, 1e-8, 1e-12):
        below = np.nonzero(profile < tol)[0]
        logger.info(f"|C| < {tol:.0e} beyond offset {below[0] if below.size else n}", lvl=1)

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(11, 4.5))
    try:
        im = ax1.imshow(C, norm=mplcolors.LogNorm(vmin=1e-14, vmax=1.0))
        fig.colorbar(im, ax=ax1)
        ax2.semilogy(profile)
        ax2.set_xlabel("diagonal offset")
        ax2.set_ylabel("max |C| / max |C|")
        fig.savefig("coefficients.png")
        logger.info(f"Plot saved at {os.getcwd()}/coefficients.png", lvl=1)
    finally:
        plt.close(fig)

# =============================================================================
# EXAMPLE 3: Windowed vs. dense
# =============================================================================

def example_3_bandwidth(N: int = 200, beta: float = 20.0, n: int = 201, seed: int = 42):
    """
    Random hermitian model: windowed evaluation for growing bandwidth against
    the dense reference with the same approximation and with the exact function.
    """
    logger.title("EXAMPLE 3: bandwidth", 50, '=')
    rng     = np.random.default_rng(seed)
    A       = rng.standard_normal((N, N)) + 1j * rng.standard_normal((N, N))
    H, _    = rescale_operator((A + A.conj().T) / 2)
    Da      = rng.standard_normal((N, N))
    Db      = Da.T.copy()
    eta     = 1j / beta

    f       = approx_conductivity(beta, eta, n, n)
    ref     = eval_diag(f, H, Da, Db)
    exact   = eval_diag(conductivity_function(beta, eta), H, Da, Db)
    logger.info(f"dense (approximation) = {ref:.10e}", lvl=1)
    logger.info(f"dense (exact)         = {exact:.10e}", lvl=1)

    widths  = np.unique(np.linspace(0, n - 1, 12).astype(int))
    errors  = []
    for w in widths:
        res = eval_sparse_approx(f, H, Da, Db, int(w), return_result=True)
        errors.append(abs(res.value - ref) / abs(ref))
        logger.info(f"bandwidth={w:4d}, window={res.max_window:4d}, relative deviation={errors[-1]:.3e}", lvl=1)

    fig, ax = plt.subplots(figsize=(6, 4.5))
    try:
        ax.semilogy(widths, np.maximum(errors, 1e-17), "o-")
        ax.set_xlabel("bandwidth")
        ax.set_ylabel("relative deviation from dense")
        fig.savefig("bandwidth.png")
        logger.info(f"Plot saved at {os.getcwd()}/bandwidth.png", lvl=1)
    finally:
        plt.close(fig)

# =============================================================================

if __name__ == "__main__":
    matplotlib.use("Agg")
    example_1_convergence()
    example_2_coefficients()
    example_3_bandwidth()
