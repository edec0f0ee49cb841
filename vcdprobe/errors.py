"""
Exceptions raised while reading VCD files.
"""


class VCDError(Exception):
    """
    Base class for every error raised by vcdprobe
    """
    def __init__(self, message):
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        return self.message


class VCDFormatError(VCDError):
    """
    A required section or marker is missing, or a line cannot be parsed
    """


class UnsupportedInputError(VCDError):
    """
    The file name does not end in .vcd or .vcd.gz
    """
    def __init__(self, path):
        self.path = path
        super().__init__(f'File must end in .vcd or .vcd.gz: {path}')


class UnknownSymbolError(VCDError, LookupError):
    """
    A value update references a symbol that the header never declared
    """
    def __init__(self, symbol, line):
        self.symbol = symbol
        self.line = line
        super().__init__(f'Unknown symbol {symbol!r} in value update: {line}')
