from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_DOWN

SCALE = 4
_QUANTUM = Decimal(1).scaleb(-SCALE)


@dataclass(frozen=True, order=True)
class Currency:
    """
    Signed fixed-point amount with four fractional digits.
    Stored as an integer count of ten-thousandths so add/subtract are exact.
    """

    units: int = 0

    @classmethod
    def from_str(cls, text: str) -> "Currency":
        """Parse a decimal string, truncating anything past four fractional digits."""
        try:
            value = Decimal(text.strip())
            if not value.is_finite():
                raise InvalidOperation
            quantized = value.quantize(_QUANTUM, rounding=ROUND_DOWN)
        except InvalidOperation:
            raise ValueError(f"invalid currency amount: {text!r}") from None
        return cls(int(quantized.scaleb(SCALE)))

    def __add__(self, other: "Currency") -> "Currency":
        if not isinstance(other, Currency):
            return NotImplemented
        return Currency(self.units + other.units)

    def __sub__(self, other: "Currency") -> "Currency":
        if not isinstance(other, Currency):
            return NotImplemented
        return Currency(self.units - other.units)

    def __neg__(self) -> "Currency":
        return Currency(-self.units)

    def is_negative(self) -> bool:
        return self.units < 0

    def is_positive(self) -> bool:
        return self.units > 0

    def to_decimal(self) -> Decimal:
        return Decimal(self.units).scaleb(-SCALE)

    def __str__(self) -> str:
        return f"{self.to_decimal():.{SCALE}f}"

    def __repr__(self) -> str:
        return f"Currency({self})"


ZERO = Currency(0)
