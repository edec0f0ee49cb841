# Units
from pint import UnitRegistry
ureg = UnitRegistry(case_sensitive=True)
Q_ = ureg.Quantity

from vcdprobe.logging import logger, set_log_level
from vcdprobe.errors import VCDError, VCDFormatError, UnsupportedInputError, UnknownSymbolError
from vcdprobe.core import Signal, SignalType, ValueTimeTuple, SigVal, TimePoint
from vcdprobe.vcd import VCD
from vcdprobe.counters import CounterDetector, CounterReport
from vcdprobe.histogram import ProgressHistogram, toggle_histogram
