# file        :   chebcond/algebra/utils.py
# author      :   Maksymilian Kliczkowski
# copyright   :   (c) 2025, Maksymilian Kliczkowski

'''
This module reads the numerical configuration of the package from the
environment and provides the array backend used by the Chebyshev streams
and the conductivity evaluators.

- It detects whether JAX is installed and whether it was requested through
`PY_BACKEND`.

- It selects the floating point precision from `PY_FLOATING_POINT`
(64 bit by default) and exposes the corresponding NumPy dtypes.

Provides:
- `get_backend`      : return `numpy` or `jax.numpy` for a backend specifier.
- `get_complex_type` : accumulation dtype for bilinear sums.
- `matvec`           : operator-vector product that works for dense, sparse
                       and `LinearOperator` operators.
- `operator_shape`   : shape of any of the above.
'''

import os
from typing import Union, Optional, TypeAlias, Type, Any

import numpy as np
import scipy.sparse as sps
from scipy.sparse.linalg import LinearOperator

# ---------------------------------------------------------------------
#! Enviroment variable names
# ---------------------------------------------------------------------

PY_BACKEND_STR          : str               = "PY_BACKEND"
PY_FLOATING_POINT_STR   : str               = "PY_FLOATING_POINT"
PY_INFO_VERBOSE_STR     : str               = "PY_BACKEND_INFO"

DEFAULT_BACKEND         : str               = "numpy"

# ---------------------------------------------------------------------
#! SET VARIABLES
# ---------------------------------------------------------------------

PREFER_32BIT            : bool              = os.environ.get(PY_FLOATING_POINT_STR, "64bit").lower() in ["32bit", "32", "float32", "float"]
PY_FLOATING_POINT       : str               = "float32" if PREFER_32BIT else "float64"
PY_NP_FLOAT_TYPE        : Type              = np.float32 if PREFER_32BIT else np.float64
PY_NP_CPX_TYPE          : Type              = np.complex64 if PREFER_32BIT else np.complex128
PY_BACKEND              : str               = os.environ.get(PY_BACKEND_STR, DEFAULT_BACKEND).lower()
PY_INFO_VERBOSE         : bool              = os.environ.get(PY_INFO_VERBOSE_STR, "0") != "0"

# by default, use numpy
PREFER_JAX              : bool              = PY_BACKEND not in ("numpy", "np")

#! Backend Detection
JAX_AVAILABLE           : bool              = False
jax                     : Optional[Any]     = None
jnp                     : Optional[Any]     = None

try:
    import jax
    import jax.numpy as jnp
    from jax import config as jcfg
    jcfg.update("jax_enable_x64", not PREFER_32BIT)
    JAX_AVAILABLE       = True
except ImportError:
    jax                 = None
    jnp                 = None

#! Type Aliases
if JAX_AVAILABLE and jnp is not None:
    Array       : TypeAlias = Union[np.ndarray, jnp.ndarray]
else:
    Array       : TypeAlias = np.ndarray

Operator        : TypeAlias = Union[np.ndarray, sps.spmatrix, sps.sparray, LinearOperator]

ACTIVE_BACKEND_NAME     : str               = "jax" if (PREFER_JAX and JAX_AVAILABLE) else "numpy"

# ---------------------------------------------------------------------

def _log_message(msg, lvl = 0):
    """
    Print a backend message if `PY_BACKEND_INFO` is set.
    """
    if not PY_INFO_VERBOSE:
        return
    print("\t" * lvl + msg)

if PREFER_JAX and not JAX_AVAILABLE:
    _log_message(f"{PY_BACKEND_STR}={PY_BACKEND} requested but JAX is not installed, using numpy.")
_log_message(f"Backend: {ACTIVE_BACKEND_NAME}, precision: {PY_FLOATING_POINT}")

# ---------------------------------------------------------------------
#! Global methods
# ---------------------------------------------------------------------

def get_backend(backend_spec: Union[str, Any, None] = None):
    """
    Return the array module for the backend specifier.

    Parameters
    ----------
    backend_spec : str or module or None, optional
        "numpy", "np", "jax", "jnp", the module itself, or None for the
        backend selected through `PY_BACKEND`.

    Returns
    -------
    module
        `numpy` or `jax.numpy`.

    Raises
    ------
    ValueError
        If JAX is requested but not installed, or the specifier is unknown.
    """
    if backend_spec is None or backend_spec == "default":
        backend_spec = ACTIVE_BACKEND_NAME
    if backend_spec is np:
        return np
    if jnp is not None and backend_spec is jnp:
        return jnp
    if isinstance(backend_spec, str):
        name = backend_spec.lower()
        if name in ("numpy", "np"):
            return np
        if name in ("jax", "jnp"):
            if not JAX_AVAILABLE:
                raise ValueError("JAX backend requested but JAX is not installed.")
            return jnp
    raise ValueError(f"Unsupported backend specifier: {backend_spec!r}")

def is_jax_array(x: Any) -> bool:
    '''
    Checks if an object is a JAX array.
    '''
    if not JAX_AVAILABLE:
        return False
    return isinstance(x, jax.Array)

def get_complex_type(*arrays) -> Type:
    '''
    Accumulation dtype for a complex bilinear sum.

    The configured complex type is widened if any of the inputs carries a
    wider dtype (e.g. complex128 data under 32 bit configuration).
    '''
    dtypes = [np.dtype(PY_NP_CPX_TYPE)]
    for a in arrays:
        dt = getattr(a, "dtype", None)
        if dt is not None:
            dtypes.append(np.dtype(dt))
    return np.result_type(*dtypes, np.complex64).type

# ---------------------------------------------------------------------
#! Operators
# ---------------------------------------------------------------------

def operator_shape(op: Any) -> tuple:
    '''
    Shape of a dense, sparse or LinearOperator operator.
    '''
    shape = getattr(op, "shape", None)
    if shape is None:
        raise TypeError(f"Object of type {type(op).__name__} has no shape.")
    return tuple(shape)

def matvec(op: Any, v: Array) -> Array:
    '''
    Operator-vector product.

    Works for numpy/jax arrays, scipy sparse matrices and arrays and
    `LinearOperator`. The result is always one-dimensional.
    '''
    if isinstance(op, LinearOperator):
        return op.matvec(v).reshape(-1)
    out = op @ v
    if sps.issparse(out):
        out = out.toarray()
    return out.reshape(-1)

def first_column(op: Any) -> np.ndarray:
    '''
    First column of an operator as a dense one-dimensional array.
    '''
    if sps.issparse(op):
        return np.asarray(op[:, [0]].toarray()).reshape(-1)
    if isinstance(op, LinearOperator):
        e1      = np.zeros(op.shape[1], dtype=op.dtype if op.dtype is not None else PY_NP_FLOAT_TYPE)
        e1[0]   = 1
        return op.matvec(e1).reshape(-1)
    return op[:, 0]

def to_dense(op: Any) -> np.ndarray:
    '''
    Dense representation of a dense, sparse or LinearOperator operator.
    '''
    if sps.issparse(op):
        return op.toarray()
    if isinstance(op, LinearOperator):
        return op @ np.eye(op.shape[1], dtype=op.dtype if op.dtype is not None else PY_NP_FLOAT_TYPE)
    return np.asarray(op)

# ---------------------------------------------------------------------
#! EOF
# ---------------------------------------------------------------------
