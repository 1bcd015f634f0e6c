# chebcond/__init__.py

"""
Chebyshev conductivity - banded Chebyshev evaluation of conductivity-like trace formulas.

The package evaluates
    sigma = (1/N) sum_{i1,i2} C[i1,i2] <T_{i1}(H) v1, Da T_{i2}(H) v2>
for a large Hermitian H with memory O(bandwidth N), streaming the Chebyshev
vectors of both sides and keeping only a sliding window of them.

Modules:
--------
- algebra   : Lazy recurrence streams, Chebyshev interpolation, backend configuration and errors
- common    : Logging
- physics   : Fermi-Dirac helpers, the separable approximation and the conductivity evaluators

Examples:
---------
>>> from chebcond.physics.response import approx_conductivity, eval_sparse_approx
>>> f     = approx_conductivity(beta=10.0, eta=0.1j, npoly=200, nrat=200)
>>> sigma = eval_sparse_approx(f, H, Da, Db, bandwidth=40)

File    : chebcond/__init__.py
Version : 0.1.0
Author  : Maksymilian Kliczkowski
License : MIT
"""

import importlib

# Package metadata
__version__         = "0.1.0"
__author__          = "Maksymilian Kliczkowski"
__email__           = "maksymilian.kliczkowski@pwr.edu.pl"
__license__         = "MIT"

# List of available modules (not imported by default)
__all__             = ["algebra", "common", "physics"]

def get_module_description(module_name):
    """
    Get the description of a specific module in the chebcond package.

    Parameters
    ----------
    module_name : str
        The name of the module.

    Returns
    -------
    str
        The description of the module.
    """
    descriptions = {
        "algebra"   : "Lazy recurrence streams, Chebyshev interpolation and series, backend configuration, errors.",
        "common"    : "Console and file logging with verbosity control.",
        "physics"   : "Fermi-Dirac helpers, separable conductivity approximation, windowed and dense evaluators.",
    }
    return descriptions.get(module_name, "Module not found.")

def list_available_modules():
    """
    List all available modules in the chebcond package.
    """
    return __all__

# Lazy import subpackages on attribute access (PEP 562)
def __getattr__(name):  # pragma: no cover - simple indirection
    if name in __all__:
        return importlib.import_module(f".{name}", __name__)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")

def __dir__():  # pragma: no cover
    return sorted(list(globals().keys()) + __all__)

# ---------------------------------------------------------------------
#! EOF
# ---------------------------------------------------------------------
