from .base import OptionType, OptionStyle, AveragingType, BarrierType, PricingEngine
from .contracts import OptionContract, AsianOption, BarrierOption, MarketSnapshot
from .config import LSMCConfig, MonteCarloConfig
from .exceptions import PricingError, LatticeParameterError, SingularMatrixError, UnsupportedOptionError
from .random_stream import RandomStream
from .linear_solver import solve
from .regression import RegressionEngine, laguerre_basis
from .MonteCarloSimulation import PathSimulator, MonteCarloPricing
from .BinomialTreeModel import BinomialTreeModel
from .TrinomialTreeModel import TrinomialTreeModel
from .LongstaffSchwartz import LongstaffSchwartz, LSMCResult
from .greeks import Greeks, numerical_greeks

__all__ = [
    "OptionType",
    "OptionStyle",
    "AveragingType",
    "BarrierType",
    "PricingEngine",
    "OptionContract",
    "AsianOption",
    "BarrierOption",
    "MarketSnapshot",
    "LSMCConfig",
    "MonteCarloConfig",
    "PricingError",
    "LatticeParameterError",
    "SingularMatrixError",
    "UnsupportedOptionError",
    "RandomStream",
    "solve",
    "RegressionEngine",
    "laguerre_basis",
    "PathSimulator",
    "MonteCarloPricing",
    "BinomialTreeModel",
    "TrinomialTreeModel",
    "LongstaffSchwartz",
    "LSMCResult",
    "Greeks",
    "numerical_greeks",
]
