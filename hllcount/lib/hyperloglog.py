from __future__ import annotations
import math
import numbers
import warnings
from typing import Any, Optional
import numpy as np # type: ignore
from hllcount.lib.abstractsketch import AbstractSketch, DEFAULT_SEED

DEFAULT_ERROR_RATE = 0.008
MIN_REGISTERS = 16
MIN_PRECISION = 4
MAX_PRECISION = 24
HASH_SIZE = 64
TWO_POW_32 = float(1 << 32)


class InvalidConfiguration(ValueError):
    """Raised when an estimator cannot be built from the requested parameters."""


class ConfigurationMismatch(ValueError):
    """Raised when combining estimators built with different configurations."""


def precision_for_error_rate(error_rate: float) -> int:
    """Number of index bits needed for a target standard error.

    Since error_rate = 1.04 / sqrt(m) and m = 2^b,
    b = ceil(log2((1.04 / error_rate)^2)).
    """
    if not isinstance(error_rate, numbers.Real) or isinstance(error_rate, bool):
        raise InvalidConfiguration(f"error rate must be a number, got {error_rate!r}")
    if not math.isfinite(error_rate) or error_rate <= 0:
        raise InvalidConfiguration(f"error rate must be positive and finite, got {error_rate}")
    try:
        registers = (1.04 / error_rate) ** 2
    except OverflowError:
        registers = math.inf
    if not math.isfinite(registers):
        raise InvalidConfiguration(f"error rate {error_rate} is too low")
    return int(math.ceil(math.log2(registers)))


def alpha_for(num_registers: int) -> float:
    """Bias correction constant for m registers."""
    if num_registers == 16:
        return 0.673
    elif num_registers == 32:
        return 0.697
    elif num_registers == 64:
        return 0.709
    else:
        return 0.7213 / (1.0 + 1.079 / num_registers)


def range_correction(estimate: float, num_registers: float, empty_registers: int) -> float:
    """Correct a raw HyperLogLog estimate depending on its magnitude.

    Section 4 of Flajolet et al. (2007):
        small range (E <= 5m/2): linear counting while registers are empty
        intermediate range (E <= 2^32/30): no correction
        large range: -2^32 * ln(1 - E/2^32)

    Args:
        estimate: Raw harmonic mean estimate E
        num_registers: Number of registers m
        empty_registers: Number of registers still at zero

    Returns:
        Corrected estimate
    """
    m = float(num_registers)
    if estimate <= 2.5 * m:
        if empty_registers > 0:
            return m * math.log(m / empty_registers)
        return estimate

    if estimate <= TWO_POW_32 / 30.0:
        return estimate

    log_arg = 1.0 - estimate / TWO_POW_32
    if log_arg <= 0.0:
        # ln is undefined past 2^32; the 64-bit hash is nowhere near saturated
        warnings.warn(f"Estimate {estimate:.3e} exceeds 2^32, returning it uncorrected",
                      RuntimeWarning)
        return estimate
    return -TWO_POW_32 * math.log(log_arg)


class HyperLogLog(AbstractSketch):
    """HyperLogLog distinct-count estimator.

    Each value is hashed to 64 bits. The top `precision` bits select a
    register and the remaining bits give a rank (leading zeros + 1); each
    register keeps the largest rank routed to it. The harmonic mean of
    2^-register, scaled by alpha * m^2, estimates the number of distinct
    values with standard error 1.04 / sqrt(m).
    """

    def __init__(self,
                 error_rate: float = DEFAULT_ERROR_RATE,
                 seed: Optional[int] = None,
                 debug: bool = False):
        """Initialize HyperLogLog sketch.

        Args:
            error_rate: Desired relative standard error. Determines the
                        number of registers, m = 2^ceil(log2((1.04/error_rate)^2)).
            seed: Seed for the xxHash function (default 42)
            debug: Whether to print debug information

        Raises:
            InvalidConfiguration: If error_rate is not positive or yields
                                  fewer than 16 or more than 2^24 registers
        """
        super().__init__()
        precision = precision_for_error_rate(error_rate)
        self._configure(precision, seed, debug)
        self.error_rate = float(error_rate)

    @classmethod
    def from_precision(cls,
                       precision: int,
                       seed: Optional[int] = None,
                       debug: bool = False) -> 'HyperLogLog':
        """Create a sketch with an explicit number of index bits.

        Args:
            precision: Number of bits for register indexing (4-24)

        Returns:
            Empty HyperLogLog with 2^precision registers
        """
        sketch = cls.__new__(cls)
        sketch._configure(precision, seed, debug)
        sketch.error_rate = sketch.error()
        return sketch

    def _configure(self, precision: int, seed: Optional[int], debug: bool) -> None:
        if precision < MIN_PRECISION:
            raise InvalidConfiguration(
                f"error rate too high; register count below minimum of {MIN_REGISTERS} "
                f"(precision {precision})")
        if precision > MAX_PRECISION:
            raise InvalidConfiguration(
                f"error rate too low; precision {precision} exceeds maximum of {MAX_PRECISION}")

        self.precision = precision
        self.num_registers = 1 << precision
        self.registers = np.zeros(self.num_registers, dtype=np.uint8)
        self.alpha = alpha_for(self.num_registers)
        self.seed = seed if seed is not None else DEFAULT_SEED
        self.debug = debug
        self.item_count = 0

        # Bits left after the register index, and the mask selecting them
        self._value_bits = HASH_SIZE - precision
        self._value_mask = (1 << self._value_bits) - 1

    def _rank(self, value_bits: int) -> int:
        """Leading zeros of the value bits plus one, in [1, 64 - precision + 1]."""
        return self._value_bits - value_bits.bit_length() + 1

    def add_hash(self, hash_val: int) -> None:
        """Add a precomputed 64-bit hash to the sketch."""
        hash_val = int(hash_val) & 0xFFFFFFFFFFFFFFFF
        idx = hash_val >> self._value_bits
        rank = self._rank(hash_val & self._value_mask)
        if rank > self.registers[idx]:
            self.registers[idx] = rank

    def add(self, value: Any) -> None:
        """Add a value to the sketch.

        Args:
            value: A str, bytes, int, float, None, or a tuple/frozenset of these

        Raises:
            TypeError: If the value has no stable byte encoding
        """
        hash_val = self.hash64(value)
        self.item_count += 1
        self.add_hash(hash_val)

    def raw_estimate(self) -> float:
        """Harmonic mean estimate alpha * m^2 / sum(2^-M[j]) before correction."""
        harmonic_sum = float(np.sum(np.exp2(-self.registers.astype(np.float64))))
        m = float(self.num_registers)
        return self.alpha * m * m / harmonic_sum

    def empty_registers(self) -> int:
        """Number of registers that have never been set."""
        return int(np.count_nonzero(self.registers == 0))

    def count(self) -> int:
        """Estimate the number of distinct values added.

        Returns:
            Non-negative integer estimate
        """
        raw = self.raw_estimate()
        empty = self.empty_registers()
        corrected = range_correction(raw, self.num_registers, empty)
        if self.debug:
            print(f"DEBUG: m={self.num_registers}, raw={raw:.1f}, empty={empty}, corrected={corrected:.1f}")
        return max(0, int(corrected))

    def error(self) -> float:
        """Theoretical standard error 1.04 / sqrt(m) for this configuration."""
        return 1.04 / math.sqrt(self.num_registers)

    def _check_compatible(self, other: 'HyperLogLog') -> None:
        if not isinstance(other, HyperLogLog):
            raise TypeError("Can only merge with another HyperLogLog sketch")
        if self.precision != other.precision:
            raise ConfigurationMismatch(
                f"Cannot merge HyperLogLog sketches with different precisions "
                f"({self.precision} vs {other.precision})")
        if self.seed != other.seed:
            raise ConfigurationMismatch(
                f"Cannot merge HyperLogLog sketches with different seeds "
                f"({self.seed} vs {other.seed})")

    def merge(self, other: 'HyperLogLog') -> 'HyperLogLog':
        """Merge another HLL sketch into this one.

        Takes the element-wise maximum of the registers, so this sketch then
        estimates the cardinality of the union of both input streams.

        Args:
            other: Another HyperLogLog sketch to merge into this one

        Returns:
            This sketch, for chaining

        Raises:
            ConfigurationMismatch: If the sketches differ in precision or seed
        """
        self._check_compatible(other)
        np.maximum(self.registers, other.registers, out=self.registers)
        self.item_count += other.item_count
        if self.debug:
            print(f"DEBUG: merged sketch, {self.empty_registers()}/{self.num_registers} registers empty")
        return self

    def union(self, other: 'HyperLogLog') -> 'HyperLogLog':
        """Return a new sketch for the union, leaving both operands untouched."""
        return self.copy().merge(other)

    def __or__(self, other: 'HyperLogLog') -> 'HyperLogLog':
        return self.union(other)

    def copy(self) -> 'HyperLogLog':
        """Return an independent copy of this sketch."""
        clone = HyperLogLog.from_precision(self.precision, self.seed, self.debug)
        clone.error_rate = self.error_rate
        clone.registers = self.registers.copy()
        clone.item_count = self.item_count
        return clone

    def is_empty(self) -> bool:
        """Check if sketch is empty."""
        return not np.any(self.registers)

    def __repr__(self) -> str:
        return (f"HyperLogLog(precision={self.precision}, num_registers={self.num_registers}, "
                f"seed={self.seed})")
