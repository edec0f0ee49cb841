import gzip

import pytest

SIMPLE_VCD = """$date
    Oct 19 2026
$end
$version
    Icarus Verilog
$end
$timescale
    1ns
$end
$scope module tb $end
$var reg 1 ! q $end
$var wire 4 " count [3:0] $end
$scope module dut $end
$var reg 1 ! q_alias $end
$var reg 2 # state [1:0] $end
$upscope $end
$upscope $end
$enddefinitions $end
#0
$dumpvars
0!
b0000 "
b00 #
$end
#0
0!
b0000 "
b00 #
#10
1!
b0001 "
b01 #
#20
0!
b0010 "
b10 #
#30
1!
b0011 "
b11 #
#40
0!
b0100 "
"""

HEADER = """$timescale 1ps $end
$scope module top $end
$var reg 8 % data [7:0] $end
$var wire 1 & clk $end
$upscope $end
$enddefinitions $end
$dumpvars
b0 %
0&
$end
"""


def write_vcd(path, text):
    if path.name.endswith('.gz'):
        with gzip.open(path, 'wt') as f:
            f.write(text)
    else:
        path.write_text(text)
    return path


@pytest.fixture
def simple_vcd(tmp_path):
    return write_vcd(tmp_path / 'simple.vcd', SIMPLE_VCD)


@pytest.fixture
def make_vcd(tmp_path):
    """Return a function writing a VCD file with the given text"""
    def make(text, name='trace.vcd'):
        return write_vcd(tmp_path / name, text)
    return make
