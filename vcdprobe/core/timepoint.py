"""
TimePoint - All value updates that happened at one simulation time.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SigVal:
    """A signal symbol and the value it was set to."""
    name: str
    value: str


@dataclass
class TimePoint:
    """
    A point in time that corresponds to a timespec in a VCD file.

    Holds the (symbol, value) pairs updated at that time, in file order.
    This time-indexed view is the dual of the signal-indexed history kept
    by Signal.

    Attributes:
        time: Simulation time
        pairs: List of SigVal
    """
    time: int
    pairs: list[SigVal] = field(default_factory=list)

    def add_pair(self, pair: SigVal) -> None:
        self.pairs.append(pair)

    def get_pair_count(self) -> int:
        return len(self.pairs)

    def get_pair(self, index: int) -> SigVal:
        return self.pairs[index]
