r"""
Lazy recurrence streams.

A stream presents the terms of a recurrence as a pull-based sequence whose
progress survives between separate pulls. Unlike a plain iterator consumed by
a ``for`` loop, the same stream can be partially drained by one call site and
resumed by another:

    >>> s = RecurrenceStream(lambda k: (k, k + 1), 0)
    >>> list(s.take(2))
    [0, 1]
    >>> list(s.take(2))
    [2, 3]

The Chebyshev stream produces the vectors
$$
T_0(H) v = v, \quad T_1(H) v = H v, \quad T_{k+1}(H) v = 2 H T_k(H) v - T_{k-1}(H) v,
$$
holding only the last two of them. Memory is O(N) regardless of how far the
stream is advanced.

File        : chebcond/algebra/stream.py
Author      : Maksymilian Kliczkowski
Email       : maksymilian.kliczkowski@pwr.edu.pl
"""

from typing import Any, Callable, Iterator, Optional, Tuple
import numpy as np

from .errors import ExhaustedError
from .utils import Array, get_backend, matvec, operator_shape

# ----------------------------------------------------------------------------------------
#! Base stream
# ----------------------------------------------------------------------------------------

class LazyRecurrenceStream:
    '''
    Stateful, resumable sequence of recurrence terms.

    Subclasses implement `_step`, which produces the next term and updates the
    recurrence state. The base class tracks the position and the optional
    limit on the number of terms.

    Attributes:
        position (int):
            Number of terms produced so far.
        limit (Optional[int]):
            Maximal number of terms, None for an unbounded stream.
    '''

    def __init__(self, limit: Optional[int] = None):
        if limit is not None and limit < 0:
            raise ValueError(f"Stream limit must be non-negative, got {limit}.")
        self.position   = 0
        self.limit      = limit

    # -----------------------------------------------------------------------

    def _step(self) -> Any:
        raise NotImplementedError("This method should be implemented by subclasses.")

    @property
    def remaining(self) -> Optional[int]:
        '''Number of terms left, None for an unbounded stream.'''
        if self.limit is None:
            return None
        return self.limit - self.position

    @property
    def exhausted(self) -> bool:
        return self.limit is not None and self.position >= self.limit

    # -----------------------------------------------------------------------

    def advance(self) -> Any:
        '''
        Produce the next term and move the stream by one position.

        Raises:
            ExhaustedError: if the limit has already been reached.
        '''
        if self.exhausted:
            raise ExhaustedError(f"{type(self).__name__} exhausted after {self.position} terms.")
        value           = self._step()
        self.position  += 1
        return value

    def advance_many(self, k: int) -> Iterator[Any]:
        '''
        Lazily produce the next `k` terms.

        The terms share the stream state: once the returned generator has been
        drained, the next call to `advance` yields term `k + 1`.
        '''
        if k < 0:
            raise ValueError(f"Number of terms must be non-negative, got {k}.")
        for _ in range(k):
            yield self.advance()

    take = advance_many

    # -----------------------------------------------------------------------

    def __next__(self):
        return self.advance()

    def __iter__(self):
        # drains the remaining terms without raising at the end
        if self.limit is None:
            return self._unbounded()
        return self.advance_many(self.remaining)

    def _unbounded(self):
        while True:
            yield self.advance()

    def __repr__(self) -> str:
        limit = "inf" if self.limit is None else self.limit
        return f"{type(self).__name__}(position={self.position}, limit={limit})"

# ----------------------------------------------------------------------------------------
#! Generic recurrence
# ----------------------------------------------------------------------------------------

class RecurrenceStream(LazyRecurrenceStream):
    '''
    Stream over a recurrence given by a step function.

    Parameters:
        step (Callable):
            `step(state) -> (value, new_state)`.
        state (Any):
            Initial state, the first term is `step(state)[0]`.
        limit (Optional[int]):
            Maximal number of terms.
    '''

    def __init__(self, step: Callable[[Any], Tuple[Any, Any]], state: Any, limit: Optional[int] = None):
        super().__init__(limit)
        self._stepf = step
        self.state  = state

    def _step(self):
        value, self.state = self._stepf(self.state)
        return value

# ----------------------------------------------------------------------------------------
#! Chebyshev vectors
# ----------------------------------------------------------------------------------------

class ChebyshevVectorStream(LazyRecurrenceStream):
    r'''
    Stream of Chebyshev-transformed vectors $T_k(H) v$, $k = 0, 1, \ldots$

    The operator is expected to have its spectrum inside [-1, 1]; see
    `chebcond.algebra.chebyshev.rescale_operator`.

    Parameters:
        hamiltonian:
            Operator H (dense, sparse, LinearOperator or JAX array).
        vector:
            Seed vector v of length N.
        limit (Optional[int]):
            Maximal number of vectors.
        backend:
            Array backend specifier, see `chebcond.algebra.utils.get_backend`.
    '''

    def __init__(self, hamiltonian, vector: Array, limit: Optional[int] = None, backend=None):
        super().__init__(limit)
        xp      = get_backend(backend)
        vector  = xp.asarray(vector).reshape(-1)
        shape   = operator_shape(hamiltonian)
        if shape[1] != vector.shape[0]:
            raise ValueError(f"Seed vector of length {vector.shape[0]} does not match operator of shape {shape}.")
        self.hamiltonian    = hamiltonian
        self._xp            = xp
        # (T_{k-1} v, T_k v) of the last produced degree k
        self._prev          = None
        self._curr          = vector

    @property
    def degree(self) -> int:
        '''Degree of the next vector to be produced.'''
        return self.position

    def _step(self) -> Array:
        if self.position == 0:
            return self._curr
        if self.position == 1:
            nxt = matvec(self.hamiltonian, self._curr)
        else:
            nxt = 2 * matvec(self.hamiltonian, self._curr) - self._prev
        self._prev, self._curr = self._curr, nxt
        return nxt

# ----------------------------------------------------------------------------------------
#! EOF
# ----------------------------------------------------------------------------------------
