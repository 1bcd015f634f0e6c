r"""
Chebyshev interpolation and Chebyshev series of operators.

Provides:
    - Chebyshev nodes of the first kind and interpolation of one- and
      two-dimensional functions on [-1, 1] (coefficients through a type-II DCT)
    - `ChebyshevSeries`   : $q(x) = \sum_k a_k T_k(x)$, evaluated on scalars/arrays
                            or applied to an operator as $q(H) v$
    - `ChebyshevSeries2D` : $p(x_1, x_2) = \sum_{k,l} C_{kl} T_k(x_1) T_l(x_2)$
    - `rescale_operator`  : affine map of a Hermitian operator into [-1, 1]

Mathematical Background:
    On the nodes $x_j = \cos(\pi (j + 1/2) / n)$, $j = 0, \ldots, n-1$, the
    interpolant of degree $n-1$ has coefficients
    $$
    a_k = \frac{2 - \delta_{k0}}{n} \sum_j f(x_j) \cos\left(\frac{\pi k (2j+1)}{2n}\right),
    $$
    which is the unnormalised DCT-II divided by n (halved for k = 0).

References:
    [1] L. N. Trefethen, Approximation Theory and Approximation Practice (SIAM, 2013).
    [2] A. Weiße, G. Wellein, A. Alvermann, H. Fehske, Rev. Mod. Phys. 78, 275 (2006).

File        : chebcond/algebra/chebyshev.py
Author      : Maksymilian Kliczkowski
Email       : maksymilian.kliczkowski@pwr.edu.pl
"""

from typing import Callable, Optional, Tuple, Union
import numpy as np
import numpy.polynomial.chebyshev as npcheb
import scipy.sparse as sps
import scipy.linalg as la
from scipy import fft
from scipy.sparse.linalg import LinearOperator, eigsh

from .utils import Array, matvec, operator_shape
from .stream import ChebyshevVectorStream

# =============================================================================
# Nodes and coefficients
# =============================================================================

def chebyshev_nodes(n: int) -> np.ndarray:
    r"""
    Chebyshev nodes of the first kind, $x_j = \cos(\pi (j + 1/2) / n)$.

    The nodes are returned in decreasing order, strictly inside (-1, 1).
    """
    if n < 1:
        raise ValueError(f"Number of nodes must be positive, got {n}.")
    return np.cos(np.pi * (np.arange(n) + 0.5) / n)

def _dct_coefficients(values: np.ndarray, axis: int) -> np.ndarray:
    """
    Chebyshev coefficients from node values along one axis.

    Complex inputs are transformed through their real and imaginary parts.
    """
    n = values.shape[axis]
    if np.iscomplexobj(values):
        coeffs = fft.dct(values.real, type=2, axis=axis) + 1j * fft.dct(values.imag, type=2, axis=axis)
    else:
        coeffs = fft.dct(values, type=2, axis=axis)
    coeffs         /= n
    first           = [slice(None)] * coeffs.ndim
    first[axis]     = 0
    coeffs[tuple(first)] /= 2
    return coeffs

def chebyshev_coefficients(values: Array) -> np.ndarray:
    """
    Coefficients of the interpolant through `values` given on `chebyshev_nodes(len(values))`.
    """
    values = np.asarray(values)
    if values.ndim != 1:
        raise ValueError("Expected a one-dimensional array of node values.")
    return _dct_coefficients(values.astype(np.result_type(values, float)), axis=0)

def chebyshev_coefficients_2d(values: Array) -> np.ndarray:
    """
    Coefficients of the tensor-product interpolant through `values[i, j]`
    given on the grid `(chebyshev_nodes(n1)[i], chebyshev_nodes(n2)[j])`.
    """
    values = np.asarray(values)
    if values.ndim != 2:
        raise ValueError("Expected a two-dimensional array of node values.")
    values = values.astype(np.result_type(values, float))
    return _dct_coefficients(_dct_coefficients(values, axis=0), axis=1)

# =============================================================================
# Series
# =============================================================================

class ChebyshevSeries:
    r'''
    One-dimensional Chebyshev series $q(x) = \sum_{k=0}^{n-1} a_k T_k(x)$.

    The series can be evaluated pointwise (`q(x)`) or applied to an operator
    (`q.apply(H, v)`, equivalently `q(H, v)`), in which case the vectors
    $T_k(H) v$ are streamed and never stored together.
    '''

    def __init__(self, coefficients: Array):
        coefficients = np.asarray(coefficients)
        if coefficients.ndim != 1 or coefficients.size == 0:
            raise ValueError("Chebyshev series needs a non-empty one-dimensional coefficient array.")
        self.coefficients = coefficients

    @property
    def degree(self) -> int:
        return self.coefficients.size - 1

    def __len__(self) -> int:
        return self.coefficients.size

    def __call__(self, x, v: Optional[Array] = None):
        if v is not None:
            return self.apply(x, v)
        return npcheb.chebval(x, self.coefficients)

    def apply(self, hamiltonian, v: Array, backend=None) -> Array:
        r'''
        Compute $q(H) v = \sum_k a_k T_k(H) v$.

        Parameters:
            hamiltonian:
                Operator with spectrum in [-1, 1].
            v:
                Vector of length N.
            backend:
                Array backend specifier.
        Returns:
            The vector q(H) v.
        '''
        stream  = ChebyshevVectorStream(hamiltonian, v, limit=len(self), backend=backend)
        out     = None
        for a_k, Tv in zip(self.coefficients, stream):
            out = a_k * Tv if out is None else out + a_k * Tv
        return out

    def __eq__(self, other) -> bool:
        if not isinstance(other, ChebyshevSeries):
            return NotImplemented
        return self.coefficients.shape == other.coefficients.shape and np.array_equal(self.coefficients, other.coefficients)

    __hash__ = None

    def __repr__(self) -> str:
        return f"ChebyshevSeries(degree={self.degree}, dtype={self.coefficients.dtype})"

class ChebyshevSeries2D:
    r'''
    Two-dimensional Chebyshev series
    $p(x_1, x_2) = \sum_{k,l} C_{kl} T_k(x_1) T_l(x_2)$.
    '''

    def __init__(self, coefficients: Array):
        coefficients = np.asarray(coefficients)
        if coefficients.ndim != 2 or coefficients.size == 0:
            raise ValueError("Two-dimensional Chebyshev series needs a non-empty coefficient matrix.")
        self.coefficients = coefficients

    @property
    def shape(self) -> Tuple[int, int]:
        return self.coefficients.shape

    def __call__(self, x1, x2):
        '''Pointwise evaluation, x1 and x2 are broadcast against each other.'''
        x1, x2 = np.broadcast_arrays(np.asarray(x1), np.asarray(x2))
        return npcheb.chebval2d(x1, x2, self.coefficients)

    def grid(self, x1: Array, x2: Array) -> np.ndarray:
        '''Evaluation on the tensor grid, out[i, j] = p(x1[i], x2[j]).'''
        return npcheb.chebgrid2d(np.asarray(x1), np.asarray(x2), self.coefficients)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ChebyshevSeries2D):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self.coefficients, other.coefficients)

    __hash__ = None

    def __repr__(self) -> str:
        return f"ChebyshevSeries2D(shape={self.shape}, dtype={self.coefficients.dtype})"

# =============================================================================
# Interpolation
# =============================================================================

def chebyshev_interpolate(func: Callable, n: int) -> ChebyshevSeries:
    """
    Interpolate a vectorised function on n Chebyshev nodes.

    Parameters
    ----------
    func : callable
        f(x) accepting an array of points in [-1, 1]. Real or complex valued.
    n : int
        Number of nodes (the series has degree n - 1).

    Returns
    -------
    ChebyshevSeries
    """
    x       = chebyshev_nodes(n)
    values  = np.broadcast_to(np.asarray(func(x)), x.shape)
    return ChebyshevSeries(chebyshev_coefficients(values))

def chebyshev_interpolate_2d(func: Callable, n: Union[int, Tuple[int, int]]) -> ChebyshevSeries2D:
    """
    Interpolate a vectorised function of two variables on a Chebyshev tensor grid.

    Parameters
    ----------
    func : callable
        f(x1, x2) broadcasting over its arguments.
    n : int or tuple of int
        Number of nodes per dimension.

    Returns
    -------
    ChebyshevSeries2D
    """
    n1, n2  = (n, n) if np.isscalar(n) else n
    x1      = chebyshev_nodes(n1)
    x2      = chebyshev_nodes(n2)
    values  = np.broadcast_to(np.asarray(func(x1[:, np.newaxis], x2[np.newaxis, :])), (n1, n2))
    return ChebyshevSeries2D(chebyshev_coefficients_2d(values))

# =============================================================================
# Spectral rescaling
# =============================================================================

def spectral_bounds(hamiltonian, tol: float = 0.0) -> Tuple[float, float]:
    """
    Smallest and largest eigenvalue of a Hermitian operator.

    Dense operators are diagonalised, sparse ones and LinearOperators are
    handled through ARPACK.
    """
    if isinstance(hamiltonian, np.ndarray):
        evals = la.eigvalsh(hamiltonian)
        return float(evals[0]), float(evals[-1])
    lmax = float(eigsh(hamiltonian, k=1, which='LA', return_eigenvectors=False, tol=tol)[0])
    lmin = float(eigsh(hamiltonian, k=1, which='SA', return_eigenvectors=False, tol=tol)[0])
    return lmin, lmax

def rescale_operator(hamiltonian, bounds: Optional[Tuple[float, float]] = None, eps: float = 0.05):
    r"""
    Rescale a Hermitian operator so that its spectrum lies strictly inside [-1, 1].

    $\tilde H = (H - b) / a$ with $a = (E_{max} - E_{min}) / (2 - \epsilon)$ and
    $b = (E_{max} + E_{min}) / 2$.

    Parameters
    ----------
    hamiltonian : array, sparse matrix or LinearOperator
        Hermitian operator.
    bounds : tuple of float, optional
        (E_min, E_max). Computed when not given.
    eps : float, optional
        Safety margin, the spectrum ends up in [-1 + eps/2, 1 - eps/2] (default: 0.05).

    Returns
    -------
    rescaled : same kind as the input (LinearOperator for LinearOperators)
        The operator \tilde H.
    (a, b) : tuple of float
        Scale and shift, E = a * x + b.

    Raises
    ------
    ValueError
        If the operator has a single eigenvalue or eps is not in (0, 2).
    """
    if not 0 < eps < 2:
        raise ValueError(f"eps must be in (0, 2), got {eps}.")
    lmin, lmax  = bounds if bounds is not None else spectral_bounds(hamiltonian, tol=eps / 2)
    if lmax - lmin <= 1e-12 * max(abs(lmax), abs(lmin), 1.0):
        raise ValueError("The operator has a single eigenvalue, it cannot be rescaled.")

    a           = abs(lmax - lmin) / (2.0 - eps)
    b           = (lmax + lmin) / 2.0
    shape       = operator_shape(hamiltonian)

    if isinstance(hamiltonian, np.ndarray):
        rescaled = (hamiltonian - b * np.eye(shape[0], dtype=hamiltonian.dtype)) / a
    elif sps.issparse(hamiltonian):
        rescaled = (hamiltonian - b * sps.identity(shape[0], dtype=hamiltonian.dtype, format='csr')) / a
    else:
        def _rescaled(v):
            return (matvec(hamiltonian, v) - b * v.reshape(-1)) / a
        rescaled = LinearOperator(shape=shape, matvec=_rescaled, dtype=getattr(hamiltonian, "dtype", None))
    return rescaled, (a, b)

# =============================================================================
#! End of file
# =============================================================================
