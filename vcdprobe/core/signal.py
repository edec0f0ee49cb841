"""
Signal - A variable declared in the header of a VCD file.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SignalType(Enum):
    wire = 'wire'
    reg = 'reg'

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ValueTimeTuple:
    """A signal value and the time that value was set."""
    value: str
    time: int


class Signal:
    """
    A signal holds the declaration of a VCD variable, its current value,
    the time of its last update and its performance counters.

    When created with keep_history=True the signal also owns the complete,
    chronologically ordered list of its value updates (see get_values()).
    Signals created without history only remember the current value, which
    keeps memory bounded when streaming large files.

    Attributes:
        path: Hierarchical scope prefix, including the trailing '/'
        short_name: Name of the signal inside its scope
        type: SignalType.wire or SignalType.reg
        width: Number of bits
        symbol: Identifier used for the signal in the values section
        value: Current value (None until the first update)
        time_of_last_update: Simulation time of the last update
        toggles: Number of updates since creation or the last counter reset
        time_high: Reserved, never accumulated
        time_low: Reserved, never accumulated
        history: List of ValueTimeTuple, or None for a signal without history
    """

    def __init__(self,
                 path: str,
                 short_name: str,
                 type: SignalType,
                 width: int,
                 symbol: str,
                 keep_history: bool = False) -> None:
        """
        Create a signal.

        Args:
            path: Path in the design hierarchy. Assumes an ending '/'.
            short_name: Short name of the signal
            type: Signal type; reg or wire
            width: Number of bits in the signal
            symbol: Symbol used in the VCD file for this signal
            keep_history: Record every value update
        """
        self.path = path
        self.short_name = short_name
        self.type = type
        self.width = width
        self.symbol = symbol

        self.value: Optional[str] = None
        self.time_of_last_update = 0

        # Performance counters
        self.time_low = 0
        self.time_high = 0
        self.toggles = 0

        self.history: Optional[list[ValueTimeTuple]] = [] if keep_history else None

    @classmethod
    def from_full_name(cls, full_name: str, type: SignalType, width: int,
                       symbol: str, keep_history: bool = False) -> 'Signal':
        """Create a signal from a combined path and name, e.g. '/top/dut/q'."""
        split = full_name.rfind('/') + 1
        return cls(full_name[:split], full_name[split:], type, width, symbol,
                   keep_history=keep_history)

    def __str__(self) -> str:
        return f"Signal({self.name}, {self.type}, width={self.width}, symbol={self.symbol!r})"

    def __repr__(self) -> str:
        return self.__str__()

    @property
    def name(self) -> str:
        """Fully-qualified name: path followed by the short name."""
        return self.path + self.short_name

    @property
    def has_history(self) -> bool:
        return self.history is not None

    def set_value(self, value: str, time: int) -> None:
        """
        Update the current value and time of last update.

        Every call counts as a toggle, including the first one. Signals
        with history also append the update to their history.
        """
        self.time_of_last_update = time
        self.value = value
        self.toggles += 1
        if self.history is not None:
            self.history.append(ValueTimeTuple(value, time))

    def reset_counters(self) -> None:
        """Reset the performance counters. Value and update time are kept."""
        self.time_low = 0
        self.time_high = 0
        self.toggles = 0

    def get_values(self) -> list[ValueTimeTuple]:
        """
        Return every (value, time) update recorded for this signal,
        oldest first.
        """
        self._require_history()
        return self.history

    def reset_history(self) -> None:
        """Clear the value history. Value and update time are kept."""
        self._require_history()
        self.history.clear()

    def history_equals(self, other: 'Signal') -> bool:
        """
        Return True if other recorded the same updates at the same times.

        Counters and width must match as well.
        """
        values = self.get_values()
        other_values = other.get_values()

        # Fast checks first
        if len(values) != len(other_values):
            return False
        if self.time_low != other.time_low:
            return False
        if self.time_high != other.time_high:
            return False
        if self.toggles != other.toggles:
            return False
        if self.width != other.width:
            return False

        return values == other_values

    def _require_history(self) -> None:
        if self.history is None:
            raise ValueError(f'{self.name} was created without value history')
