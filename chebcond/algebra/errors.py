'''
Error types raised by the Chebyshev streams and the conductivity evaluators.

All problems are detected eagerly (before any Chebyshev vector is produced)
except for the stream exhaustion, which signals a bookkeeping bug in the
caller.

file        :   chebcond/algebra/errors.py
author      :   Maksymilian Kliczkowski
'''

from enum import Enum
from typing import Optional

# -----------------------------------------------------------------------------
#! Errors
# -----------------------------------------------------------------------------

class ConductivityErrorMsg(Enum):
    '''
    Enumeration class for conductivity error messages.
    '''
    DIM_MISMATCH        = 201
    FACTOR_MISMATCH     = 202
    STREAM_EXHAUSTED    = 203
    WINDOW_OVERFLOW     = 204

    def __str__(self):
        return self.name.replace('_', ' ').title()

    def __repr__(self):
        return f"<{self.__class__.__name__}.{self.name}: '{str(self)}'>"

class ConductivityError(Exception):
    '''
    Base class for exceptions in the conductivity package.
    '''
    def __init__(self, code: ConductivityErrorMsg, message: Optional[str] = None):
        self.code       = code
        self.message    = message if message else str(code)
        super().__init__(self.message)

    def __str__(self):
        return f"[{self.__class__.__name__} {self.code.name} ({self.code.value})]: {self.message}"

    def __repr__(self):
        return self.__str__()

class DimensionMismatch(ConductivityError, ValueError):
    '''
    Operator or coefficient-matrix sizes are inconsistent, or the two factors
    of a semiseparated approximation differ.
    '''
    def __init__(self, message: Optional[str] = None, code: ConductivityErrorMsg = ConductivityErrorMsg.DIM_MISMATCH):
        super().__init__(code, message)

class ExhaustedError(ConductivityError):
    '''
    A stream was advanced past its last available term, or a sliding window
    was filled beyond its capacity.

    Not a subclass of StopIteration, so it is never swallowed by a for-loop
    or turned into a RuntimeError inside a generator.
    '''
    def __init__(self, message: Optional[str] = None, code: ConductivityErrorMsg = ConductivityErrorMsg.STREAM_EXHAUSTED):
        super().__init__(code, message)

# -----------------------------------------------------------------------------
#! EOF
# -----------------------------------------------------------------------------
