"""
Physics layer of chebcond.

**Thermal:**
- thermal                       : Fermi-Dirac function, its derivative and divided difference

**Response Functions (subpackage):**
- response.approximation        : Separable Chebyshev approximation p(x1,x2) q(x1) q(x2)
- response.conductivity         : Windowed (banded) and dense conductivity evaluators

Examples:
---------
>>> from chebcond.physics import thermal
>>> F = thermal.fermidiff(E[:, None], E[None, :], beta=10.0)

File    : chebcond/physics/__init__.py
Author  : Maksymilian Kliczkowski
License : MIT
"""

from . import thermal
from . import response

__all__ = [
    'thermal',
    'response',
]
