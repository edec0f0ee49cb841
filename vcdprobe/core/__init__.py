"""
Core data structures for vcdprobe - signals and time points.
"""

from vcdprobe.core.signal import Signal, SignalType, ValueTimeTuple
from vcdprobe.core.timepoint import SigVal, TimePoint

__all__ = [
    'Signal',
    'SignalType',
    'ValueTimeTuple',
    'SigVal',
    'TimePoint',
]
