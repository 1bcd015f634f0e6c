r"""
Conductivity trace formula evaluated with a bounded window of Chebyshev vectors.

With the separable approximation $F(x_1, x_2) \approx p(x_1, x_2) q(x_1) q(x_2)$,
$p = \sum C_{i_1 i_2} T_{i_1} \otimes T_{i_2}$, the conductivity reads
$$
\sigma = \frac{1}{N} \sum_{i_1, i_2} C_{i_1 i_2}
    \left( T_{i_1}(H) v_1 \right)^\dagger D_a \, T_{i_2}(H) v_2,
\qquad v_1 = q(H) e_1, \quad v_2 = q(H) D_b e_1 .
$$
Storing every $T_k(H) v_1$ costs O(nN) memory. Since C decays away from its
diagonal, only $|i_1 - i_2| \leq$ bandwidth is kept: the $v_2$ recurrence is
advanced one degree per step while the $v_1$ recurrence runs `bandwidth`
degrees ahead, its vectors kept in a sliding window of at most
min(n, 2 bandwidth + 1) entries. Memory is O(bandwidth N); the cost is
O(n bandwidth N) inner products plus 3n operator applications.

The dense reference `eval_diag` diagonalises H and evaluates the same
quantity for any function on the eigenvalue grid, in O(N^3).

File    : chebcond/physics/response/conductivity.py
Author  : Maksymilian Kliczkowski
Email   : maksymilian.kliczkowski@pwr.edu.pl
"""

from collections import deque
from typing import Any, Callable, NamedTuple, Optional, TYPE_CHECKING, Union
import numpy as np
import scipy.linalg as la

from ...algebra.errors import ConductivityErrorMsg, DimensionMismatch, ExhaustedError
from ...algebra.stream import ChebyshevVectorStream
from ...algebra.utils import (
    Array, PY_NP_FLOAT_TYPE,
    first_column, get_backend, get_complex_type, matvec, operator_shape, to_dense,
)
from .approximation import SemiseparatedApproximation

if TYPE_CHECKING:
    from ...common.flog import Logger

# =============================================================================
# Results
# =============================================================================

class ConductivityResult(NamedTuple):
    '''
    Detailed result of the windowed evaluation.

    Attributes:
        value (complex):
            The conductivity sum divided by N.
        n (int):
            Size of the coefficient matrix.
        bandwidth (int):
            Number of off-diagonals kept on each side.
        v1_pulls (int):
            Number of Chebyshev vectors produced on the v1 side.
        v2_pulls (int):
            Number of Chebyshev vectors produced on the v2 side.
        max_window (int):
            Largest number of v1 vectors held at the same time.
    '''
    value       : complex
    n           : int
    bandwidth   : int
    v1_pulls    : int
    v2_pulls    : int
    max_window  : int

# =============================================================================
# Sliding window
# =============================================================================

class _ChebyshevWindow:
    '''
    Bounded double-ended buffer of consecutive Chebyshev vectors.

    The capacity is enforced explicitly; callers evict before they insert.
    Degrees are strictly increasing and consecutive from front to back.
    '''

    def __init__(self, capacity: int):
        self.capacity   = capacity
        self.peak       = 0
        self._vectors   = deque()
        self._first     = 0

    def __len__(self):
        return len(self._vectors)

    def __iter__(self):
        return iter(self._vectors)

    @property
    def first_degree(self) -> int:
        return self._first

    def push(self, degree: int, vector: Array):
        if len(self._vectors) >= self.capacity:
            raise ExhaustedError(f"Window of capacity {self.capacity} is full, cannot admit degree {degree}.",
                                code=ConductivityErrorMsg.WINDOW_OVERFLOW)
        if degree != self._first + len(self._vectors):
            raise ExhaustedError(f"Degree {degree} does not follow degree {self._first + len(self._vectors) - 1} in the window.",
                                code=ConductivityErrorMsg.WINDOW_OVERFLOW)
        self._vectors.append(vector)
        self.peak = max(self.peak, len(self._vectors))

    def evict(self):
        self._vectors.popleft()
        self._first += 1

# =============================================================================
# Validation
# =============================================================================

def _check_operators(hamiltonian, Da, Db) -> int:
    '''
    All three operators must be N x N for the same N. Returns N.
    '''
    shapes = {name: operator_shape(op) for name, op in (("H", hamiltonian), ("Da", Da), ("Db", Db))}
    N      = shapes["H"][0] if len(shapes["H"]) == 2 else -1
    for name, shape in shapes.items():
        if len(shape) != 2 or shape != (N, N):
            raise DimensionMismatch(f"Operators must all be square of the same size, got "
                                    + ", ".join(f"{k}: {v}" for k, v in shapes.items()))
    if N < 1:
        raise DimensionMismatch("Operators must have at least one row.")
    return N

def _check_coefficients(C: np.ndarray, n: Optional[int]) -> int:
    if C.ndim != 2 or C.shape[0] != C.shape[1] or C.shape[0] < 1:
        raise DimensionMismatch(f"Coefficient matrix must be square and non-empty, got shape {C.shape}.")
    if n is not None and C.shape != (n, n):
        raise DimensionMismatch(f"Coefficient matrix of shape {C.shape} does not match the declared degree {n}.")
    return C.shape[0]

def _apply_factor(q, hamiltonian, v: Array, backend) -> Array:
    if hasattr(q, "apply"):
        return q.apply(hamiltonian, v, backend=backend)
    return q(hamiltonian, v)

# =============================================================================
# Windowed evaluator
# =============================================================================

def eval_sparse(hamiltonian,
                Da,
                Db,
                C                   : Array,
                q                   : Any,
                bandwidth           : int,
                *,
                n                   : Optional[int]         = None,
                return_result       : bool                  = False,
                logger              : Optional['Logger']    = None,
                backend                                     = None) -> Union[complex, ConductivityResult]:
    r"""
    Evaluate the conductivity formula keeping only the coefficients within
    `bandwidth` of the diagonal of C.

    $$
    \sigma = \frac{1}{N} \sum_{i_2=0}^{n-1} \sum_{|i_1 - i_2| \leq w}
        C_{i_1 i_2} (T_{i_1}(H) v_1)^\dagger D_a T_{i_2}(H) v_2 .
    $$

    Parameters
    ----------
    hamiltonian : array, sparse matrix or LinearOperator, shape (N, N)
        Hermitian operator with spectrum in [-1, 1].
    Da : array or sparse matrix, shape (N, N)
        Weight of the bilinear form.
    Db : array or sparse matrix, shape (N, N)
        Only its first column is used, as the second seed.
    C : array-like, shape (n, n)
        Chebyshev coefficients of the core. Entries further than `bandwidth`
        from the diagonal are never read.
    q : ChebyshevSeries or callable
        Scalar factor, applied once to each seed: `q.apply(H, v)` or `q(H, v)`.
    bandwidth : int
        Number of off-diagonals kept on each side, >= 0. Values >= n keep everything.
    n : int, optional
        Declared degree; C must then be n x n.
    return_result : bool, optional
        Return a `ConductivityResult` instead of the bare value (default: False).
    logger : Logger, optional
        Logger for the problem sizes.
    backend : optional
        Array backend specifier ("numpy" or "jax").

    Returns
    -------
    complex or ConductivityResult

    Raises
    ------
    DimensionMismatch
        If H, Da, Db are not all N x N or C is not a square n x n matrix.
    ValueError
        If bandwidth is negative.

    Notes
    -----
    Both streams are advanced exactly n times. The window is primed with
    min(bandwidth, n) vectors, then at each step the vector that fell more
    than `bandwidth` behind is evicted before the one `bandwidth` ahead is
    admitted.
    """
    N           = _check_operators(hamiltonian, Da, Db)
    C           = np.asarray(C)
    n           = _check_coefficients(C, n)
    if int(bandwidth) != bandwidth or bandwidth < 0:
        raise ValueError(f"Bandwidth must be a non-negative integer, got {bandwidth}.")
    bandwidth   = int(bandwidth)

    xp          = get_backend(backend)
    dtype       = get_complex_type(hamiltonian, Da, Db, C)
    capacity    = min(n, 2 * bandwidth + 1)
    if logger:
        logger.info(f"Windowed conductivity: N={N}, n={n}, bandwidth={bandwidth}, window={capacity}", lvl=1)

    #! seeds
    e1          = np.zeros(N, dtype=PY_NP_FLOAT_TYPE)
    e1[0]       = 1
    v1          = _apply_factor(q, hamiltonian, e1, backend)
    v2          = _apply_factor(q, hamiltonian, first_column(Db), backend)

    stream1     = ChebyshevVectorStream(hamiltonian, v1, limit=n, backend=backend)
    stream2     = ChebyshevVectorStream(hamiltonian, v2, limit=n, backend=backend)
    window      = _ChebyshevWindow(capacity)

    #! prime with degrees 0 .. min(bandwidth, n) - 1
    for Tv1 in stream1.take(min(bandwidth, n)):
        window.push(stream1.position - 1, Tv1)

    total       = dtype(0)
    for i2 in range(n):
        Tv2     = stream2.advance()
        if i2 > bandwidth:
            window.evict()
        if i2 < n - bandwidth:
            window.push(stream1.position, stream1.advance())

        DaTv2   = matvec(Da, Tv2)
        lo      = max(i2 - bandwidth, 0)
        for k, Tv1 in enumerate(window):
            total += C[lo + k, i2] * xp.vdot(Tv1, DaTv2)

    value       = complex(total) / N
    if logger:
        logger.debug(f"Pulled {stream1.position} + {stream2.position} vectors, peak window {window.peak}, sigma={value:.6e}", lvl=2)
    if not return_result:
        return value
    return ConductivityResult(value, n, bandwidth, stream1.position, stream2.position, window.peak)

def eval_sparse_approx(f          : SemiseparatedApproximation,
                    hamiltonian,
                    Da,
                    Db,
                    bandwidth   : int,
                    **kwargs) -> Union[complex, ConductivityResult]:
    r"""
    Windowed evaluation for a `SemiseparatedApproximation`.

    Parameters
    ----------
    f : SemiseparatedApproximation
        Approximation $p(x_1, x_2) q(x_1) q(x_2)$; both factors must be the same.
    hamiltonian, Da, Db, bandwidth :
        See `eval_sparse`.
    **kwargs :
        Forwarded to `eval_sparse` (return_result, logger, backend).

    Raises
    ------
    DimensionMismatch
        If the factors differ (code FACTOR_MISMATCH), or any size check of
        `eval_sparse` fails.
    """
    if not f.symmetric:
        raise DimensionMismatch("Both factors of the approximation must be identical.",
                                code=ConductivityErrorMsg.FACTOR_MISMATCH)
    return eval_sparse(hamiltonian, Da, Db, f.coefficients, f.factors[0], bandwidth, n=f.npoly, **kwargs)

# =============================================================================
# Dense reference
# =============================================================================

def eval_diag(f: Union[SemiseparatedApproximation, Callable], hamiltonian, Da, Db) -> complex:
    r"""
    Evaluate the conductivity formula by diagonalising the Hamiltonian.

    With $H = \Psi E \Psi^\dagger$, $\tilde D_a = \Psi^\dagger D_a \Psi$ and
    $\tilde d_b = \Psi^\dagger D_b e_1$,
    $$
    \sigma = \frac{1}{N} \sum_{ij} \Psi_{0i} (\tilde D_a)_{ij} (\tilde d_b)_j F(E_i, E_j).
    $$

    Parameters
    ----------
    f : SemiseparatedApproximation or callable
        F(x1, x2), broadcasting over its arguments, or an approximation
        (evaluated through its factors and core).
    hamiltonian, Da, Db :
        N x N operators; sparse inputs are densified.

    Returns
    -------
    complex

    Notes
    -----
    O(N^3) time and O(N^2) memory; intended as a reference for `eval_sparse`.
    """
    N       = _check_operators(hamiltonian, Da, Db)
    E, psi  = la.eigh(to_dense(hamiltonian))
    Da_t    = psi.conj().T @ to_dense(Da) @ psi
    db_t    = psi.conj().T @ np.asarray(first_column(Db))
    if hasattr(f, "grideval"):
        F   = f.grideval(E, E)
    else:
        F   = f(E[:, np.newaxis], E[np.newaxis, :])
    M       = psi[0, :][:, np.newaxis] * Da_t * db_t[np.newaxis, :]
    return complex(np.sum(M * F)) / N

# =============================================================================
#! End of file
# =============================================================================
