# early_exercise/exceptions.py
"""
Pricing failures.

Construction-time validation of contracts, market data and configs raises a
plain ValueError. Everything raised once a pricing call has started derives
from PricingError and aborts the whole call.
"""


class PricingError(Exception):
    """Base class for failures inside a pricing call."""


class LatticeParameterError(PricingError, ValueError):
    """Risk-neutral branch probability fell outside [0, 1]."""


class SingularMatrixError(PricingError, ArithmeticError):
    """Linear system is singular or nearly singular."""


class UnsupportedOptionError(PricingError, ValueError):
    """Engine invoked on an option style it cannot price."""
