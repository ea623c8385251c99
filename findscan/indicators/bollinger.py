"""
Bollinger Bands Indicator
==========================

SMA basis with upper/lower bands at a multiple of the sample standard
deviation of the same window.

    basis  = SMA(source, length)
    stdDev = sqrt(sum((v - basis)^2) / (length - 1))
    upper  = basis + multiplier * stdDev
    lower  = basis - multiplier * stdDev

The offset shifts the finished series by whole bars; it never touches the
window math.
"""

import math
import numbers
from collections.abc import Sequence
from dataclasses import dataclass
from typing import List, Optional


class ValidationError(ValueError):
    """Malformed Bollinger Bands input."""


@dataclass(frozen=True)
class BollingerBandsInput:
    values: Sequence
    length: int
    std_dev_multiplier: float
    offset: Optional[int] = 0


@dataclass(frozen=True)
class BollingerBandsOutput:
    """Band values at one index. None means not yet available."""
    basis: Optional[float] = None
    upper: Optional[float] = None
    lower: Optional[float] = None
    std_dev: Optional[float] = None

    @property
    def is_defined(self) -> bool:
        return self.basis is not None and self.upper is not None and self.lower is not None


UNDEFINED = BollingerBandsOutput()


def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_integer(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def validate_bollinger_bands_input(bb_input: BollingerBandsInput) -> None:
    """Raise ValidationError if the input cannot be computed."""
    values = bb_input.values
    if not isinstance(values, (list, tuple)) or len(values) == 0:
        raise ValidationError("Values array must be non-empty")

    if not _is_integer(bb_input.length) or bb_input.length < 2:
        raise ValidationError("Length must be an integer >= 2")

    multiplier = bb_input.std_dev_multiplier
    if not _is_real(multiplier) or not math.isfinite(multiplier) or multiplier <= 0:
        raise ValidationError("Standard deviation multiplier must be a positive number")

    if bb_input.offset is not None and not _is_integer(bb_input.offset):
        raise ValidationError("Offset must be an integer")

    if any(not _is_real(v) or not math.isfinite(v) for v in values):
        raise ValidationError("All values must be finite numbers")


def _sma_at(values: Sequence, index: int, length: int) -> Optional[float]:
    if index < length - 1:
        return None
    return sum(values[index - length + 1:index + 1]) / length


def _stddev_at(values: Sequence, index: int, length: int, mean: float) -> Optional[float]:
    if index < length - 1:
        return None
    squared = 0.0
    for v in values[index - length + 1:index + 1]:
        diff = v - mean
        squared += diff * diff
    # Sample standard deviation (N - 1)
    return math.sqrt(squared / (length - 1))


def compute_bollinger_bands_at_index(bb_input: BollingerBandsInput, index: int) -> BollingerBandsOutput:
    """
    Bands at a single index, without offset. A window whose sums overflow
    the float range is reported as undefined rather than inf/nan.
    """
    values = bb_input.values
    if index < 0 or index >= len(values):
        raise IndexError(f"index {index} out of range for {len(values)} values")

    basis = _sma_at(values, index, bb_input.length)
    if basis is None:
        return UNDEFINED

    std_dev = _stddev_at(values, index, bb_input.length, basis)
    if std_dev is None:
        return BollingerBandsOutput(basis=basis)

    width = bb_input.std_dev_multiplier * std_dev
    upper = basis + width
    lower = basis - width
    if not all(math.isfinite(x) for x in (basis, std_dev, upper, lower)):
        return UNDEFINED
    return BollingerBandsOutput(basis=basis, upper=upper, lower=lower, std_dev=std_dev)


def apply_offset(results: List[BollingerBandsOutput], offset: int) -> List[BollingerBandsOutput]:
    """
    Shift results by offset bars. Positive moves values later in time.
    Values pushed past either end are dropped; vacated slots stay undefined.
    """
    if offset == 0:
        return results

    n = len(results)
    shifted = [UNDEFINED] * n
    for i, result in enumerate(results):
        new_index = i + offset
        if 0 <= new_index < n:
            shifted[new_index] = result
    return shifted


def compute_bollinger_bands(bb_input: BollingerBandsInput) -> List[BollingerBandsOutput]:
    """One output per input value, in input order, offset applied."""
    results = [
        compute_bollinger_bands_at_index(bb_input, i)
        for i in range(len(bb_input.values))
    ]
    offset = bb_input.offset or 0
    if offset != 0:
        return apply_offset(results, offset)
    return results


@dataclass
class BollingerBandsIndicator:
    """
    Incremental Bollinger Bands over a rolling price buffer.

    Each update evaluates the newest index with the batch engine, so the
    bands match compute_bollinger_bands for the same prices.
    """

    period: int = 20
    std_dev: float = 2.0
    max_history: int = 500

    def __post_init__(self):
        validate_bollinger_bands_input(
            BollingerBandsInput(values=[0.0], length=self.period, std_dev_multiplier=self.std_dev)
        )
        if not _is_integer(self.max_history) or self.max_history < self.period:
            raise ValidationError("max_history must be an integer >= period")
        self._prices: List[float] = []
        self._last: BollingerBandsOutput = UNDEFINED

    @staticmethod
    def _check_price(price) -> None:
        if not _is_real(price) or not math.isfinite(price):
            raise ValidationError(f"Price must be a finite number, got {price!r}")

    def update(self, price: float) -> None:
        self._check_price(price)
        self._prices.append(price)
        if len(self._prices) > self.max_history:
            del self._prices[:-self.max_history]
        self._recalculate()

    def update_batch(self, prices: List[float]) -> None:
        recent = list(prices)[-self.max_history:]
        for price in recent:
            self._check_price(price)
        self._prices = recent
        self._recalculate()

    def _recalculate(self) -> None:
        if not self._prices:
            self._last = UNDEFINED
            return
        bb_input = BollingerBandsInput(
            values=self._prices,
            length=self.period,
            std_dev_multiplier=self.std_dev,
        )
        self._last = compute_bollinger_bands_at_index(bb_input, len(self._prices) - 1)

    @property
    def basis(self) -> Optional[float]:
        return self._last.basis

    @property
    def upper(self) -> Optional[float]:
        return self._last.upper

    @property
    def lower(self) -> Optional[float]:
        return self._last.lower

    @property
    def deviation(self) -> Optional[float]:
        return self._last.std_dev

    @property
    def width_pct(self) -> Optional[float]:
        """Band spread relative to the basis, in percent."""
        last = self._last
        if not last.is_defined or last.basis == 0:
            return None
        return (last.upper - last.lower) * 100 / last.basis

    def is_above_basis(self, price: float) -> bool:
        return self.is_ready() and price > self._last.basis

    def is_below_basis(self, price: float) -> bool:
        return self.is_ready() and price < self._last.basis

    def is_wide_enough(self, min_width_pct: float) -> bool:
        width = self.width_pct
        return width is not None and width > min_width_pct

    def is_ready(self) -> bool:
        return self._last.is_defined
