r"""
chebcond/physics/response

Conductivity of non-interacting systems through Chebyshev expansions.

Modules:
--------
- approximation : Separable approximation F(x1,x2) ~ p(x1,x2) q(x1) q(x2)
- conductivity  : Windowed evaluator (memory O(bandwidth N)) and dense reference

Author: Maksymilian Kliczkowski
Email: maksymilian.kliczkowski@pwr.edu.pl
"""

from .approximation import (
    SemiseparatedApproximation,
    approx_conductivity, conductivity_function, rationalfactor,
    semiminor, nfermipoles, inverse_joukowski, theoretical_rate,
    relative_error, band_profile,
)
from .conductivity import ConductivityResult, eval_sparse, eval_sparse_approx, eval_diag

__all__ = [
    'SemiseparatedApproximation',
    'approx_conductivity', 'conductivity_function', 'rationalfactor',
    'semiminor', 'nfermipoles', 'inverse_joukowski', 'theoretical_rate',
    'relative_error', 'band_profile',
    'ConductivityResult', 'eval_sparse', 'eval_sparse_approx', 'eval_diag',
]

# ============================================================================
#! End of file
# ============================================================================
