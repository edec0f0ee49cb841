"""
Toggle histograms - bucket signals by toggle count while streaming a VCD.

ProgressHistogram is meant to be registered as the time update callback
of a VCD session. Every time the simulation crosses a new whole
percentage of its total time, it bins all signals by toggle count, writes
the bins to hist_<percent>.txt and resets the performance counters, so
each histogram covers an independent window of time.
"""

from typing import TYPE_CHECKING, Iterable

import numpy as np
import pandas as pd
from shlib import mkdir, to_path

from vcdprobe.core.signal import Signal
from vcdprobe.logging import logger
from vcdprobe.utils import get_kwarg

if TYPE_CHECKING:
    from vcdprobe.vcd import VCD

# .25% toggle rate bins
NUM_BINS = 400

COLUMNS = ['toggles', 'signals', 'bin_fraction', 'signal_fraction']


def toggle_histogram(signals: Iterable[Signal], num_bins: int = NUM_BINS) -> pd.DataFrame:
    """
    Count the signals per toggle count bin.

    The bins are equally wide and together cover every toggle count up to
    the current maximum.

    Returns:
        DataFrame with one row per bin:
            toggles: Lowest toggle count of the bin
            signals: Number of signals in the bin
            bin_fraction: Bin index / num_bins
            signal_fraction: Share of all signals in the bin
    """
    toggles = np.array([sig.toggles for sig in signals], dtype=np.int64)
    if toggles.size == 0:
        return pd.DataFrame(columns=COLUMNS)

    bin_size = int(toggles.max()) // num_bins + 1
    # A toggle count t belongs to the first bin whose cap (k + 1) * bin_size is >= t
    index = np.maximum((toggles - 1) // bin_size, 0)
    counts = np.bincount(index, minlength=num_bins)

    bins = np.arange(num_bins)
    return pd.DataFrame({
        'toggles': bins * bin_size,
        'signals': counts,
        'bin_fraction': bins / num_bins,
        'signal_fraction': counts / toggles.size,
    })


def write_histogram(histogram: pd.DataFrame, filename) -> None:
    """ Write histogram rows as tab separated values """
    histogram.to_csv(filename, sep='\t', header=False, index=False, float_format='%.4f')


class ProgressHistogram:
    """
    Time update callback that reports a toggle histogram per percent of
    simulated time.

    Attributes:
        vcd: The VCD session being read
        last_time: Last time of the values section
        percent: Last reported percentage
        histograms: Dict of percent -> histogram DataFrame
    """

    def __init__(self, vcd: 'VCD', last_time: int, **kwargs) -> None:
        """
        Args:
            vcd: VCD session whose signals are binned
            last_time: Last time of the values section (see VCD.get_last_time())

        Keyword Args:
            num_bins: Number of bins per histogram (default 400)
            output_dir: Directory for the hist_<percent>.txt files (default '.')
            write_files: Write histogram files (default True)
            keep: Keep every histogram in self.histograms (default True)
        """
        self.vcd = vcd
        self.last_time = last_time
        self.num_bins = get_kwarg(kwargs, 'num_bins', NUM_BINS)
        self.output_dir = to_path(get_kwarg(kwargs, 'output_dir', '.'))
        self.write_files = get_kwarg(kwargs, 'write_files', True)
        self.keep = get_kwarg(kwargs, 'keep', True)
        self.percent = 0
        self.histograms: dict[int, pd.DataFrame] = {}
        if self.write_files:
            mkdir(self.output_dir)

    def __call__(self, time: int) -> None:
        self.report_progress(time)

    def report_progress(self, time: int) -> None:
        percent = time * 100 // self.last_time if self.last_time > 0 else 100
        if percent <= self.percent:
            return
        self.percent = percent
        logger.info(f'{percent}%')

        histogram = toggle_histogram(self.vcd.signals.values(), self.num_bins)
        if self.write_files:
            write_histogram(histogram, to_path(self.output_dir, f'hist_{percent}.txt'))
        if self.keep:
            self.histograms[percent] = histogram
        self.vcd.reset_performance_counters()
