# early_exercise/base.py
from enum import Enum
from abc import ABC, abstractmethod

# Local package imports
from .greeks import numerical_greeks


class OptionType(Enum):
    CALL = 'call'
    PUT = 'put'

    @classmethod
    def parse(cls, value):
        """
        Accepts many common option_type forms:
         - 'call', 'put' (case-insensitive)
         - 'Call Option', 'Put Option'
         - OptionType enum values
        """
        if isinstance(value, OptionType):
            return value
        opt = str(value).strip().lower()
        if opt.startswith('call'):
            return cls.CALL
        if opt.startswith('put'):
            return cls.PUT
        raise ValueError(f"Unsupported option_type: {value}")


class OptionStyle(Enum):
    EUROPEAN = 'european'
    AMERICAN = 'american'

    @classmethod
    def parse(cls, value):
        """
        Accepts 'european' / 'american' in any case, with or without a
        trailing word ('American Option'), or an OptionStyle value.
        """
        if isinstance(value, OptionStyle):
            return value
        style = str(value).strip().lower()
        for member in cls:
            if style.startswith(member.value):
                return member
        raise ValueError(f"Unsupported option style: {value}")


class AveragingType(Enum):
    ARITHMETIC = 'arithmetic'
    GEOMETRIC = 'geometric'

    @classmethod
    def parse(cls, value):
        if isinstance(value, AveragingType):
            return value
        avg = str(value).strip().lower()
        for member in cls:
            if avg.startswith(member.value):
                return member
        raise ValueError(f"Unsupported averaging type: {value}")


class BarrierType(Enum):
    UP_AND_IN = 'up-and-in'
    UP_AND_OUT = 'up-and-out'
    DOWN_AND_IN = 'down-and-in'
    DOWN_AND_OUT = 'down-and-out'

    @classmethod
    def parse(cls, value):
        """Accepts enum values, 'up-and-out', 'Up and Out', 'up_and_out', ..."""
        if isinstance(value, BarrierType):
            return value
        key = str(value).strip().lower().replace('_', '-').replace(' ', '-')
        for member in cls:
            if key == member.value:
                return member
        raise ValueError(f"Unsupported barrier type: {value}")

    @property
    def is_up(self):
        return self in (BarrierType.UP_AND_IN, BarrierType.UP_AND_OUT)

    @property
    def is_knock_in(self):
        return self in (BarrierType.UP_AND_IN, BarrierType.DOWN_AND_IN)


class PricingEngine(ABC):
    """Abstract class defining interface for option pricing engines."""

    @abstractmethod
    def price(self, option, market):
        """Returns the present value of `option` under `market`."""
        raise NotImplementedError()

    def greeks(self, option, market):
        """Finite-difference sensitivities; see greeks.numerical_greeks."""
        return numerical_greeks(self._price_for_greeks, option, market)

    def _price_for_greeks(self, option, market):
        # Stateful engines override this to price every bump on the same draws.
        return self.price(option, market)
