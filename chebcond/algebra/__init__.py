"""
Linear algebra layer of chebcond.

Modules:
--------
- utils     : Environment configuration, array backend, operator helpers
- errors    : Error codes and exceptions
- stream    : Lazy recurrence streams (generic and Chebyshev vectors)
- chebyshev : Chebyshev nodes, interpolation, series and spectral rescaling
"""

from .errors import ConductivityErrorMsg, ConductivityError, DimensionMismatch, ExhaustedError
from .stream import LazyRecurrenceStream, RecurrenceStream, ChebyshevVectorStream
from .chebyshev import (
    ChebyshevSeries, ChebyshevSeries2D,
    chebyshev_nodes, chebyshev_interpolate, chebyshev_interpolate_2d,
    rescale_operator, spectral_bounds,
)

__all__ = [
    'ConductivityErrorMsg', 'ConductivityError', 'DimensionMismatch', 'ExhaustedError',
    'LazyRecurrenceStream', 'RecurrenceStream', 'ChebyshevVectorStream',
    'ChebyshevSeries', 'ChebyshevSeries2D',
    'chebyshev_nodes', 'chebyshev_interpolate', 'chebyshev_interpolate_2d',
    'rescale_operator', 'spectral_bounds',
]
