"""
Counter detection - find signals in a VCD file that may be counters.

The detection is a heuristic made of four steps, run over signals that
keep their complete value history:

1. Signals that never repeat a value become suspects.
2. Suspects with identical histories are merged, keeping the one with the
   longest path (the same register seen through several hierarchy levels).
3. Suspects that took every value their width allows are dropped.
4. Remaining suspects with fewer than two values are constants, the others
   are possible counters.

Example:
    vcd = VCD('top.vcd', complete_history=True)
    vcd.read_values_from_vcd()
    report = CounterDetector(vcd.signals.values()).run()
    print(report.num_counters)
"""

from dataclasses import dataclass, field
from typing import Iterable

import pandas as pd

from vcdprobe.core.signal import Signal
from vcdprobe.logging import logger

# Widest signal whose value space is enumerated by the fully-expressed check
MAX_WIDTH = 28


@dataclass
class CounterReport:
    """
    Result of the counter detection.

    Attributes:
        constants: Suspects with fewer than two recorded values
        counters: Suspects reported as possible counters
    """
    constants: list[Signal] = field(default_factory=list)
    counters: list[Signal] = field(default_factory=list)

    @property
    def num_constants(self) -> int:
        return len(self.constants)

    @property
    def num_counters(self) -> int:
        return len(self.counters)

    def lines(self, print_values: bool = False) -> list[str]:
        """Return the report as text lines."""
        lines = [f'Constant: {sig.name}' for sig in self.constants]
        for sig in self.counters:
            lines.append(f'Possible counter: {sig.name}')
            if print_values:
                lines += [f'\t{vtt.value}' for vtt in sig.get_values()]
        lines.append(f'{self.num_constants} constants')
        lines.append(f'{self.num_counters} possible counters')
        return lines

    def to_dataframe(self) -> pd.DataFrame:
        """Return one row per classified signal."""
        rows = []
        for classification, signals in (('constant', self.constants), ('counter', self.counters)):
            for sig in signals:
                rows.append({
                    'name': sig.name,
                    'symbol': sig.symbol,
                    'width': sig.width,
                    'values': len(sig.get_values()),
                    'classification': classification,
                })
        return pd.DataFrame(rows, columns=['name', 'symbol', 'width', 'values', 'classification'])


class CounterDetector:
    """
    Runs the counter detection steps over a collection of signals.

    Attributes:
        signals: All signals under analysis
        suspects: Signals still considered possible counters. None before
            generate_initial_suspects() ran.
        max_width: Widest signal checked for being fully expressed
    """

    def __init__(self, signals: Iterable[Signal], max_width: int = MAX_WIDTH) -> None:
        self.signals = list(signals)
        for sig in self.signals:
            if not sig.has_history:
                raise ValueError(f'Counter detection needs value history, {sig.name} has none')
        self.max_width = max_width
        self.suspects: list[Signal] | None = None

    def run(self, report_each_step: bool = False) -> CounterReport:
        """Run all four steps and return the classification."""
        logger.info(f'Checking {len(self.signals)} signals for counters')

        self.generate_initial_suspects()
        self._log_step('Creating initial suspects from signals with no repeated values', report_each_step)

        self.remove_duplicate_suspects()
        self._log_step('Removing identical suspects with different names', report_each_step)

        self.remove_fully_expressed_suspects()
        self._log_step('Removing suspects that are fully-expressed', report_each_step)

        return self.classify()

    def generate_initial_suspects(self) -> list[Signal]:
        """Make every signal without repeated values a suspect."""
        self.suspects = []
        if not self.signals:
            logger.warning('Cannot generate initial set of suspects: no signals')
            return self.suspects

        for sig in self.signals:
            # Sorting brings repeated values next to each other
            values = sorted(vtt.value for vtt in sig.get_values())
            if all(a != b for a, b in zip(values, values[1:])):
                self.suspects.append(sig)
        return self.suspects

    def remove_duplicate_suspects(self) -> list[Signal]:
        """
        Merge suspects with identical histories, keeping the one with the
        longer path.
        """
        if not self._has_suspects():
            return self.suspects

        suspects = self.suspects
        a = 0
        while a < len(suspects):
            # Skip suspects with only init values
            if not suspects[a].get_values():
                a += 1
                continue
            b = a + 1
            while b < len(suspects):
                if suspects[a].history_equals(suspects[b]):
                    if len(suspects[b].path) > len(suspects[a].path):
                        suspects[a] = suspects[b]
                    del suspects[b]
                else:
                    b += 1
            a += 1
        return suspects

    def remove_fully_expressed_suspects(self) -> list[Signal]:
        """Drop suspects that took every value their width allows."""
        if not self._has_suspects():
            return self.suspects

        self.suspects = [sig for sig in self.suspects if not self._is_fully_expressed(sig)]
        return self.suspects

    def classify(self) -> CounterReport:
        """Split the remaining suspects into constants and possible counters."""
        report = CounterReport()
        for sig in self.suspects or []:
            if len(sig.get_values()) < 2:
                report.constants.append(sig)
            else:
                report.counters.append(sig)
        logger.info(f'{report.num_constants} constants, {report.num_counters} possible counters')
        return report

    def _is_fully_expressed(self, sig: Signal) -> bool:
        # Only check smallish signals
        if sig.width > self.max_width:
            return False
        distinct = {vtt.value for vtt in sig.get_values()}
        return len(distinct) == 1 << sig.width

    def _has_suspects(self) -> bool:
        if not self.suspects:
            logger.warning('No suspects yet')
            return False
        return True

    def _log_step(self, description: str, report_each_step: bool) -> None:
        logger.info(f'{description}: {len(self.suspects)} suspects')
        if report_each_step:
            for sig in self.suspects:
                logger.info(f'Possible counter: {sig.name}')
