"""
hllcount - HyperLogLog distinct counting for large streams
"""

from hllcount.lib.hyperloglog import (
    HyperLogLog,
    InvalidConfiguration,
    ConfigurationMismatch,
    range_correction,
)
from hllcount.lib.exact import ExactCounter

__version__ = '0.1.0'

__all__ = [
    'HyperLogLog',
    'InvalidConfiguration',
    'ConfigurationMismatch',
    'range_correction',
    'ExactCounter',
]
