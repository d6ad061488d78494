"""RGB radiance values.

An ``RGBSpectrum`` stores linear radiance per color channel. Values are
unbounded but must always be finite: every constructor and every operation
producing a new spectrum validates its components.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


def _check_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise ValueError(f"the {name} is not a valid number: {value}")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class RGBSpectrum:
    """An immutable red, green and blue radiance triple.

    Attributes:
        red: The red component (in radiance).
        green: The green component (in radiance).
        blue: The blue component (in radiance).

    Raises:
        ValueError: If any component is infinite or NaN.
    """

    red: float
    green: float
    blue: float

    def __post_init__(self) -> None:
        _check_finite("red component", self.red)
        _check_finite("green component", self.green)
        _check_finite("blue component", self.blue)

    @classmethod
    def gray(cls, value: float) -> RGBSpectrum:
        """Create a spectrum with all three components equal to ``value``."""
        return cls(value, value, value)

    def add(self, other: RGBSpectrum) -> RGBSpectrum:
        return RGBSpectrum(self.red + other.red, self.green + other.green, self.blue + other.blue)

    def add_components(self, red: float, green: float, blue: float) -> RGBSpectrum:
        return self.add(RGBSpectrum(red, green, blue))

    def subtract(self, other: RGBSpectrum) -> RGBSpectrum:
        return RGBSpectrum(self.red - other.red, self.green - other.green, self.blue - other.blue)

    def subtract_components(self, red: float, green: float, blue: float) -> RGBSpectrum:
        return self.subtract(RGBSpectrum(red, green, blue))

    def scale(self, scalar: float) -> RGBSpectrum:
        _check_finite("scalar", scalar)
        return RGBSpectrum(self.red * scalar, self.green * scalar, self.blue * scalar)

    def divide(self, divisor: float) -> RGBSpectrum:
        """Divide every component by ``divisor``.

        Raises:
            ValueError: If the divisor is zero or not finite.
        """
        if divisor == 0.0:
            raise ValueError("the divisor cannot be equal to zero")
        _check_finite("divisor", divisor)
        return self.scale(1.0 / divisor)

    def multiply(self, other: RGBSpectrum) -> RGBSpectrum:
        """Multiply component-wise."""
        return RGBSpectrum(self.red * other.red, self.green * other.green, self.blue * other.blue)

    def pow(self, power: float) -> RGBSpectrum:
        """Raise every component to ``power``; ``pow(1.0)`` returns ``self``."""
        if power == 1.0:
            return self
        return RGBSpectrum(
            math.pow(self.red, power), math.pow(self.green, power), math.pow(self.blue, power)
        )

    def clamp(self, low: float, high: float) -> RGBSpectrum:
        """Clamp every component into ``[low, high]``."""
        return RGBSpectrum(
            min(high, max(low, self.red)),
            min(high, max(low, self.green)),
            min(high, max(low, self.blue)),
        )

    def is_black(self) -> bool:
        return self.red == 0.0 and self.green == 0.0 and self.blue == 0.0

    def to_rgba(self) -> tuple[int, int, int, int]:
        """Quantize to an 8-bit color.

        Each component is rounded to the nearest integer (halves round up)
        and clamped to ``[0, 255]``; alpha is always 255. The spectrum is
        expected to already be scaled to the display range.
        """
        return (
            min(255, max(0, _round_half_up(self.red))),
            min(255, max(0, _round_half_up(self.green))),
            min(255, max(0, _round_half_up(self.blue))),
            255,
        )

    def to_argb(self) -> int:
        """Quantize like ``to_rgba`` and pack as a 32-bit ``0xAARRGGBB`` integer."""
        r, g, b, a = self.to_rgba()
        return (a << 24) | (r << 16) | (g << 8) | b

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.red, self.green, self.blue)

    def __add__(self, other: object) -> RGBSpectrum:
        if not isinstance(other, RGBSpectrum):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: object) -> RGBSpectrum:
        if not isinstance(other, RGBSpectrum):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other: object) -> RGBSpectrum:
        if isinstance(other, RGBSpectrum):
            return self.multiply(other)
        if isinstance(other, (int, float)):
            return self.scale(other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, divisor: object) -> RGBSpectrum:
        if not isinstance(divisor, (int, float)):
            return NotImplemented
        return self.divide(divisor)


BLACK = RGBSpectrum(0.0, 0.0, 0.0)
WHITE = RGBSpectrum(1.0, 1.0, 1.0)
RED = RGBSpectrum(1.0, 0.0, 0.0)
