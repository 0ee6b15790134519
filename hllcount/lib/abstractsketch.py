from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Iterable, Tuple
import numbers
import struct
import xxhash # type: ignore

DEFAULT_SEED = 42

class AbstractSketch(ABC):
    """Base class for distinct-count sketches."""

    @abstractmethod
    def add(self, value: Any) -> None:
        """Add a value to the sketch."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Return the (estimated) number of distinct values added."""
        pass

    def add_string(self, s: str) -> None:
        """Add a string to the sketch."""
        self.add(s)

    def add_int(self, value: int) -> None:
        """Add an integer to the sketch."""
        self.add(value)

    def add_batch(self, values: Iterable[Any]) -> None:
        """Add multiple values to the sketch.

        Args:
            values: Iterable of values to add to the sketch
        """
        for value in values:
            self.add(value)

    def estimate_cardinality(self) -> float:
        """Return the cardinality as a float."""
        return float(self.count())

    def __len__(self) -> int:
        return self.count()

    # Hash functions - static methods for use by all sketch implementations
    @staticmethod
    def _encode(value: Any) -> Tuple[bytes, bytes]:
        """Encode a value as a (type tag, payload) pair.

        Strings are UTF-8 encoded, bytes-like values are used as-is, integers
        use their signed little-endian representation and floats their IEEE-754
        double. Tuples and frozensets are encoded element by element, with the
        elements of a frozenset sorted so that iteration order does not matter.

        Raises:
            TypeError: For any other type, since there is no encoding that
                       is guaranteed to be equal for equal values
        """
        if isinstance(value, str):
            return b's', value.encode('utf-8')
        if isinstance(value, (bytes, bytearray, memoryview)):
            return b'b', bytes(value)
        if isinstance(value, numbers.Integral):
            value = int(value)
            length = max(8, (value.bit_length() + 8) // 8)
            return b'i', value.to_bytes(length, byteorder='little', signed=True)
        if isinstance(value, float):
            return b'f', struct.pack('<d', value)
        if value is None:
            return b'n', b''
        if isinstance(value, tuple):
            return b'T', b''.join(AbstractSketch._encode_element(v) for v in value)
        if isinstance(value, frozenset):
            return b'F', b''.join(sorted(AbstractSketch._encode_element(v) for v in value))
        raise TypeError(
            f"Cannot hash value of type {type(value).__name__}; "
            f"use str, bytes, int, float, None, or tuples/frozensets of these")

    @staticmethod
    def _encode_element(value: Any) -> bytes:
        """Tagged, length-prefixed encoding of a container element."""
        tag, payload = AbstractSketch._encode(value)
        return tag + len(payload).to_bytes(8, byteorder='little') + payload

    @staticmethod
    def _to_bytes(value: Any) -> bytes:
        """Encode a value as bytes for hashing."""
        tag, payload = AbstractSketch._encode(value)
        if tag in (b's', b'b', b'i', b'f'):
            return payload
        return tag + payload

    @staticmethod
    def _hash64(data: bytes, seed: int = DEFAULT_SEED) -> int:
        """64-bit hash of raw bytes.

        Args:
            data: Bytes to hash
            seed: Random seed for hashing

        Returns:
            64-bit hash value as integer
        """
        hasher = xxhash.xxh64(seed=seed)
        hasher.update(data)
        return hasher.intdigest()

    def hash64(self, value: Any) -> int:
        """Instance method to hash a value using the instance's seed.

        Args:
            value: Value to hash

        Returns:
            64-bit hash value as integer
        """
        seed = getattr(self, 'seed', DEFAULT_SEED)
        return self._hash64(self._to_bytes(value), seed=seed)
