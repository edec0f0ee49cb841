"""
VCD - Analysis session over one Value Change Dump file.

Example:
    vcd = VCD('sim_data/top.vcd', complete_history=True)
    vcd.set_time_update_callback(lambda t: print(t))
    vcd.read_values_from_vcd()
    for signal in vcd.signals.values():
        print(signal.name, signal.toggles)
"""

from pathlib import Path
from typing import Callable, Iterator, Optional

from vcdprobe import ureg
from vcdprobe.core.signal import Signal, SignalType
from vcdprobe.core.timepoint import SigVal, TimePoint
from vcdprobe.errors import UnknownSymbolError, VCDError, VCDFormatError
from vcdprobe.logging import logger
from vcdprobe.scanner import (
    SectionReader,
    is_down_scope,
    is_end_of_header,
    is_end_of_initial_values,
    is_timespec,
    is_up_scope,
    is_var_decl,
    parse_timespec,
)
from vcdprobe.utils import convert_value_format

TimeCallback = Callable[[int], object]

# Size in characters of the first tail searched by get_last_time()
INITIAL_TAIL = 1000


class VCD:
    """
    A VCD file and everything parsed from it.

    The values section can be processed serially, observing the progress
    of time through a callback (see set_time_update_callback()), or with
    complete_history=True so that every signal keeps all of its updates.
    A time-indexed view (time_series) can be collected as well.

    Attributes:
        path: Path to the VCD file
        complete_history: Whether signals keep a full value history
        signals: Symbol table, mapping VCD symbol to Signal. None until built.
        time_series: List of TimePoint. None until collected.
    """

    def __init__(self, path: str | Path, complete_history: bool = False,
                 initial_tail: int = INITIAL_TAIL) -> None:
        """
        Args:
            path: VCD file, ending in .vcd or .vcd.gz
            complete_history: Save all historical values of every signal
            initial_tail: First tail size searched by get_last_time()
        """
        self.path = Path(path)
        self.complete_history = complete_history
        self.initial_tail = initial_tail
        self.reader = SectionReader(path)

        self.signals: Optional[dict[str, Signal]] = None
        self.time_series: Optional[list[TimePoint]] = None

        self._time_update_callback: Optional[TimeCallback] = None
        self._last_time: Optional[int] = None

    def __enter__(self) -> 'VCD':
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __str__(self) -> str:
        return f"VCD({self.path})"

    def __repr__(self) -> str:
        return self.__str__()

    def close(self) -> None:
        self.reader.close()

    # Header

    def get_timescale(self) -> str:
        """
        Return the timescale that the timespecs are expressed in, e.g. '1 ns'.

        Raises:
            VCDFormatError: if the header has no $timescale section
        """
        self.reader.seek_header()
        tokens = None
        for line in self.reader.lines():
            if is_end_of_header(line):
                break
            if tokens is None:
                if not line.strip().startswith('$timescale'):
                    continue
                line = line.strip()[len('$timescale'):]
                tokens = []
            words = line.split()
            if '$end' in words:
                tokens += words[:words.index('$end')]
                return ' '.join(tokens)
            tokens += words
        raise VCDFormatError(f'No timescale section in {self.path}')

    def get_timescale_quantity(self):
        """Return the timescale as a pint Quantity."""
        timescale = self.get_timescale().replace(' ', '')
        digits = len(timescale) - len(timescale.lstrip('0123456789'))
        if digits == 0 or digits == len(timescale):
            raise VCDFormatError(f'Invalid timescale: {timescale}')
        return ureg.Quantity(int(timescale[:digits]), timescale[digits:])

    def create_symbol_table(self) -> dict[str, Signal]:
        """
        Build the table of signals declared in the header.

        Each signal has a name and a symbol. VCD allows several declarations
        to share one symbol when they carry the same value; the first one,
        the highest in the hierarchy, is kept. The table is built once.

        Raises:
            VCDFormatError: on a malformed declaration or a missing
                $enddefinitions
        """
        if self.signals is not None:
            return self.signals

        signals = {}
        scopes = []
        self.reader.seek_header()
        for line in self.reader.lines():
            if is_end_of_header(line):
                self.signals = signals
                logger.debug(f'{self.path}: {len(signals)} signals declared')
                return signals

            # Keep track of scope for full path signal names
            if is_down_scope(line):
                parts = line.split()
                if len(parts) < 3:
                    raise VCDFormatError(f'Scope declaration without a name: {line}')
                scopes.append(parts[2])
            elif is_up_scope(line):
                if not scopes:
                    raise VCDFormatError(f'$upscope without a matching $scope: {line}')
                scopes.pop()
            elif is_var_decl(line):
                parts = line.split()
                if len(parts) != 6 and len(parts) != 7:
                    raise VCDFormatError(f'Variable declaration not in a useable format: {line}')
                symbol = parts[3]
                if symbol in signals:
                    continue
                try:
                    width = int(parts[2])
                except ValueError:
                    raise VCDFormatError(f'Invalid width in variable declaration: {line}') from None
                if width < 1:
                    raise VCDFormatError(f'Invalid width in variable declaration: {line}')
                signal_type = SignalType.reg if parts[1][0] == 'r' else SignalType.wire
                bit_range = parts[5] if len(parts) == 7 else ''
                path = '/' + ''.join(scope + '/' for scope in scopes)
                signals[symbol] = Signal(path, parts[4] + bit_range, signal_type, width,
                                         symbol, keep_history=self.complete_history)

        raise VCDFormatError(f'No $enddefinitions in {self.path}')

    def signal_name_to_symbol(self, name: str, signal_type: SignalType) -> Optional[str]:
        """
        Scan the header for the symbol of the signal with short name 'name'.
        Returns None if the signal cannot be found. Scans the file on every
        call.
        """
        self.reader.seek_header()
        for line in self.reader.lines():
            if is_end_of_header(line):
                break
            if is_var_decl(line):
                parts = line.split()
                if len(parts) >= 5 and parts[4] == name and parts[1] == str(signal_type):
                    return parts[3]
        return None

    # Sections as text

    def header_lines(self) -> Iterator[str]:
        """Yield the lines of the header section."""
        self.reader.seek_header()
        for line in self.reader.lines():
            if is_end_of_header(line):
                return
            yield line

    def initial_value_lines(self) -> Iterator[str]:
        """Yield the lines of the initial values ($dumpvars) section."""
        self.reader.seek_initial_values()
        for line in self.reader.lines():
            if is_end_of_initial_values(line):
                return
            yield line

    def value_lines(self) -> Iterator[str]:
        """Yield the lines of the times and values section. Could be gigabytes."""
        self.reader.seek_values()
        yield from self.reader.lines()

    # Values

    def set_time_update_callback(self, callback: Optional[TimeCallback]) -> None:
        """
        Set the function called with the new time on every timespec while
        running read_values_from_vcd(). Pass None to remove it. An exception
        raised by the callback stops the processing.
        """
        self._time_update_callback = callback

    register_time_callback = set_time_update_callback

    def read_values_from_vcd(self, collect_times: bool = False) -> None:
        """
        Go through the values section and apply every value update to the
        signals in the symbol table, calling the time update callback on
        every timespec.

        Args:
            collect_times: Also fill time_series from the same scan

        Raises:
            VCDFormatError: on a line that is neither a timespec nor a value update
            UnknownSymbolError: on an update of an undeclared symbol
        """
        signals = self.create_symbol_table()
        callback = self._time_update_callback
        time_series = [] if collect_times else None

        logger.info(f'Reading values from {self.path}')
        try:
            for time, symbol, value, line in self._updates(time_series, callback):
                signal = signals.get(symbol)
                if signal is None:
                    raise UnknownSymbolError(symbol, line)
                signal.set_value(value, time)
        except VCDError:
            # Partly applied updates cannot be trusted
            self.signals = None
            raise

        if collect_times:
            self.time_series = time_series

    def collect_times(self) -> list[TimePoint]:
        """
        Go through the values section and record all value updates for each
        timespec in time_series. Collected once.
        """
        if self.time_series is not None:
            return self.time_series

        time_series = []
        for _ in self._updates(time_series):
            pass
        self.time_series = time_series
        return time_series

    def _updates(self, time_series=None, callback=None):
        """
        Yield (time, symbol, value, line) for every value update in the
        values section. Updates found before the first timespec happen at
        time 0.
        """
        self.reader.seek_values()
        current_time = 0
        time_point = None
        for line in self.reader.lines():
            if is_timespec(line):
                current_time = parse_timespec(line)
                if time_series is not None:
                    time_point = TimePoint(current_time)
                    time_series.append(time_point)
                if callback is not None:
                    callback(current_time)
                continue

            parts = line.split()
            if len(parts) == 0:
                continue
            # One bit signals have no space between value and symbol
            if len(parts) == 1:
                value, symbol = parts[0][0], parts[0][1:]
            elif len(parts) == 2:
                value, symbol = parts
            else:
                raise VCDFormatError(f'Cannot read value update: {line}')

            if time_series is not None:
                if time_point is None:
                    time_point = TimePoint(current_time)
                    time_series.append(time_point)
                time_point.add_pair(SigVal(symbol, value))
            yield current_time, symbol, value, line

    def times_signal_is_value(self, symbol: str, value: int) -> list[int]:
        """Return the times at which the signal with 'symbol' was set to 'value'."""
        times = []
        for time, update_symbol, update_value, _ in self._updates():
            if update_symbol == symbol and convert_value_format(update_value) == value:
                times.append(time)
        return times

    def reset_performance_counters(self) -> None:
        """
        Reset the performance counters of all signals. Useful as part of a
        time update callback.
        """
        for signal in self.create_symbol_table().values():
            signal.reset_counters()

    # Last time

    def get_last_time(self) -> int:
        """
        Return the last timespec of the values section.

        Searches tails of the values section, doubling in size, instead of
        scanning the whole file.

        Raises:
            VCDFormatError: if the values section has no timespec
        """
        if self._last_time is not None:
            return self._last_time

        f = self.reader.seek_values()
        total_chars = 0
        while True:
            chunk = f.read(1 << 16)
            if not chunk:
                break
            total_chars += len(chunk)

        tail = self.initial_tail
        while True:
            f = self.reader.seek_values()
            if tail < total_chars:
                self._skip(f, total_chars - tail)

            last_time = None
            for line in self.reader.lines():
                if is_timespec(line):
                    last_time = line
            if last_time is not None:
                self._last_time = parse_timespec(last_time)
                logger.debug(f'{self.path}: last time {self._last_time}, tail {tail}')
                return self._last_time

            if tail >= total_chars:
                break
            tail <<= 1

        raise VCDFormatError(f'No times found in {self.path}')

    @staticmethod
    def _skip(f, count: int) -> None:
        """Skip count characters, then the rest of the line the skip ended in."""
        last = ''
        while count > 0:
            chunk = f.read(min(count, 1 << 16))
            if not chunk:
                return
            count -= len(chunk)
            last = chunk[-1]
        if last != '\n':
            f.readline()
