"""ScVal codec for Soroban contract arguments and results"""

from .scval import *
from .scval import __all__ as _scval_all

__all__ = list(_scval_all)
