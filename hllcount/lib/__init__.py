from .abstractsketch import AbstractSketch
from .hyperloglog import (
    HyperLogLog,
    InvalidConfiguration,
    ConfigurationMismatch,
    range_correction,
)
from .exact import ExactCounter
from .utils import read_tokens

__all__ = [
    'AbstractSketch',
    'HyperLogLog',
    'InvalidConfiguration',
    'ConfigurationMismatch',
    'range_correction',
    'ExactCounter',
    'read_tokens',
]
