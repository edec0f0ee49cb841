"""
Section scanner for VCD files.

A VCD file has three sections, read in this order:

    header          $timescale, $scope/$upscope, $var ... $enddefinitions $end
    initial values  $dumpvars ... $end
    values          #<time> lines followed by value updates

SectionReader positions a text stream at the start of one of these
sections. Every seek closes the stream and reads the file again from the
beginning, so the result never depends on where a previous reader stopped.
Plain (.vcd) and gzip compressed (.vcd.gz) files are supported.
"""

import gzip
from pathlib import Path
from typing import TextIO

from vcdprobe.errors import UnsupportedInputError, VCDFormatError


def strip_line(line: str) -> str:
    """Remove the line terminator."""
    return line.rstrip('\r\n')


def is_end_of_header(line: str) -> bool:
    return line.startswith('$enddefinitions')


def is_end_of_initial_values(line: str) -> bool:
    return line.strip() == '$end'


def is_var_decl(line: str) -> bool:
    return line.startswith('$var ')


def is_timespec(line: str) -> bool:
    digits = line[1:].strip()
    return line[:1] == '#' and digits.isascii() and digits.isdecimal()


def is_down_scope(line: str) -> bool:
    return line.startswith('$scope ')


def is_up_scope(line: str) -> bool:
    return line.startswith('$upscope')


def is_start_of_initial_values(line: str) -> bool:
    return line.startswith('$dumpvars')


def parse_timespec(line: str) -> int:
    """Return the time of a '#<integer>' line."""
    try:
        return int(line[1:])
    except ValueError:
        raise VCDFormatError(f'Invalid timespec: {line}') from None


class SectionReader:
    """
    Rewindable reader over a VCD file.

    Attributes:
        path: Path to the VCD file
        compressed: True for .vcd.gz files
        file: The currently open text stream, or None
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        if self.path.name.endswith('.vcd.gz'):
            self.compressed = True
        elif self.path.name.endswith('.vcd'):
            self.compressed = False
        else:
            raise UnsupportedInputError(str(path))
        self.file: TextIO | None = None

    def __enter__(self) -> 'SectionReader':
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self.file is not None:
            self.file.close()
            self.file = None

    def seek_header(self) -> TextIO:
        """Reopen the file at offset 0."""
        self.close()
        if self.compressed:
            self.file = gzip.open(self.path, 'rt')
        else:
            self.file = open(self.path, 'r')
        return self.file

    def seek_initial_values(self) -> TextIO:
        """Position the stream on the line after $dumpvars."""
        f = self.seek_header()
        for line in f:
            if is_start_of_initial_values(strip_line(line)):
                return f
        raise VCDFormatError(f'No initial values (dumpvars) section in {self.path}')

    def seek_values(self) -> TextIO:
        """Position the stream on the first line of the times and values section."""
        f = self.seek_initial_values()
        for line in f:
            # The values section follows immediately after the initial values
            if is_end_of_initial_values(strip_line(line)):
                return f
        raise VCDFormatError(f'No times and values section in {self.path}')

    def lines(self):
        """Yield the remaining lines of the open stream, without terminators."""
        for line in self.file:
            yield strip_line(line)
