import pytest

from vcdprobe import ureg
from vcdprobe.core import SignalType, SigVal
from vcdprobe.errors import UnknownSymbolError, UnsupportedInputError, VCDFormatError
from vcdprobe.vcd import VCD

from conftest import HEADER


def test_symbol_table(simple_vcd):
    vcd = VCD(simple_vcd)
    signals = vcd.create_symbol_table()
    assert sorted(signals) == ['!', '"', '#']
    assert signals['!'].name == '/tb/q'
    assert signals['!'].type == SignalType.reg
    assert signals['"'].name == '/tb/count[3:0]'
    assert signals['"'].type == SignalType.wire
    assert signals['"'].width == 4
    assert signals['#'].path == '/tb/dut/'
    assert signals['#'].short_name == 'state[1:0]'


def test_symbol_table_is_built_once(simple_vcd):
    vcd = VCD(simple_vcd)
    first = vcd.create_symbol_table()
    assert vcd.create_symbol_table() is first


def test_first_declaration_wins(simple_vcd):
    vcd = VCD(simple_vcd)
    names = [sig.name for sig in vcd.create_symbol_table().values()]
    assert '/tb/dut/q_alias' not in names


def test_bad_declaration(make_vcd):
    vcd = VCD(make_vcd('$var wire 1 ! $end\n$enddefinitions $end\n'))
    with pytest.raises(VCDFormatError, match='Variable declaration'):
        vcd.create_symbol_table()
    assert vcd.signals is None


@pytest.mark.parametrize('width', ['0', '-1'])
def test_width_must_be_positive(make_vcd, width):
    vcd = VCD(make_vcd(f'$var reg {width} ! q $end\n$enddefinitions $end\n'))
    with pytest.raises(VCDFormatError, match='Invalid width'):
        vcd.create_symbol_table()
    assert vcd.signals is None


def test_missing_enddefinitions(make_vcd):
    vcd = VCD(make_vcd('$scope module tb $end\n$var wire 1 ! q $end\n'))
    with pytest.raises(VCDFormatError):
        vcd.create_symbol_table()


def test_unbalanced_upscope(make_vcd):
    vcd = VCD(make_vcd('$upscope $end\n$enddefinitions $end\n'))
    with pytest.raises(VCDFormatError):
        vcd.create_symbol_table()


def test_unsupported_input(tmp_path):
    with pytest.raises(UnsupportedInputError):
        VCD(tmp_path / 'trace.fst')


def test_read_values(simple_vcd):
    vcd = VCD(simple_vcd)
    vcd.read_values_from_vcd()
    q = vcd.signals['!']
    assert q.toggles == 5
    assert q.value == '0'
    assert q.time_of_last_update == 40
    assert vcd.signals['"'].value == 'b0100'
    assert vcd.signals['#'].toggles == 4
    assert not q.has_history


def test_read_values_with_history(simple_vcd):
    vcd = VCD(simple_vcd, complete_history=True)
    vcd.read_values_from_vcd()
    for sig in vcd.signals.values():
        assert len(sig.get_values()) == sig.toggles
    assert [vtt.time for vtt in vcd.signals['!'].get_values()] == [0, 10, 20, 30, 40]
    assert [vtt.value for vtt in vcd.signals['!'].get_values()] == ['0', '1', '0', '1', '0']


def test_gzip_file(make_vcd, simple_vcd):
    vcd = VCD(make_vcd(simple_vcd.read_text(), name='simple.vcd.gz'))
    vcd.read_values_from_vcd()
    assert vcd.signals['!'].toggles == 5
    assert vcd.get_last_time() == 40


def test_callback_sees_every_time(simple_vcd):
    vcd = VCD(simple_vcd)
    times = []
    vcd.set_time_update_callback(times.append)
    vcd.read_values_from_vcd()
    assert times == [0, 10, 20, 30, 40]


def test_callback_sees_state_before_updates(simple_vcd):
    vcd = VCD(simple_vcd)
    seen = {}
    vcd.register_time_callback(lambda t: seen.setdefault(t, vcd.signals['"'].value))
    vcd.read_values_from_vcd()
    assert seen[0] is None
    assert seen[10] == 'b0000'
    assert seen[40] == 'b0011'


def test_callback_error_stops_reading(simple_vcd):
    vcd = VCD(simple_vcd)

    def stop(time):
        if time == 20:
            raise RuntimeError('stop')

    vcd.set_time_update_callback(stop)
    with pytest.raises(RuntimeError):
        vcd.read_values_from_vcd()
    assert vcd.signals['!'].time_of_last_update == 10


def test_reset_performance_counters(simple_vcd):
    vcd = VCD(simple_vcd)
    vcd.read_values_from_vcd()
    vcd.reset_performance_counters()
    assert all(sig.toggles == 0 for sig in vcd.signals.values())
    assert vcd.signals['!'].time_of_last_update == 40


def test_unknown_symbol(make_vcd):
    vcd = VCD(make_vcd(HEADER + '#0\n1?\n'))
    with pytest.raises(UnknownSymbolError) as exc:
        vcd.read_values_from_vcd()
    assert isinstance(exc.value, LookupError)
    assert exc.value.symbol == '?'


def test_unknown_symbol_discards_updates(make_vcd):
    vcd = VCD(make_vcd(HEADER + '#0\n1&\n1?\n'))
    with pytest.raises(UnknownSymbolError):
        vcd.read_values_from_vcd()
    assert vcd.signals is None

    # A new scan starts from a fresh symbol table
    with pytest.raises(UnknownSymbolError):
        vcd.read_values_from_vcd()
    assert vcd.create_symbol_table()['&'].toggles == 0


def test_malformed_value_line(make_vcd):
    vcd = VCD(make_vcd(HEADER + '#0\nb01 % extra\n'))
    with pytest.raises(VCDFormatError):
        vcd.read_values_from_vcd()


def test_update_before_first_time(make_vcd):
    vcd = VCD(make_vcd(HEADER + '1&\n#5\n0&\n'))
    vcd.read_values_from_vcd(collect_times=True)
    clk = vcd.signals['&']
    assert clk.toggles == 2
    assert [tp.time for tp in vcd.time_series] == [0, 5]
    assert vcd.time_series[0].pairs == [SigVal('&', '1')]


def test_read_values_collects_times(simple_vcd):
    vcd = VCD(simple_vcd, complete_history=True)
    vcd.read_values_from_vcd(collect_times=True)
    assert [tp.time for tp in vcd.time_series] == [0, 10, 20, 30, 40]
    assert vcd.time_series[0].pairs == [SigVal('!', '0'), SigVal('"', 'b0000'), SigVal('#', 'b00')]
    assert vcd.time_series[-1].get_pair_count() == 2


def test_collect_times(simple_vcd):
    vcd = VCD(simple_vcd)
    series = vcd.collect_times()
    assert vcd.collect_times() is series
    assert series[1].pairs[0] == SigVal('!', '1')
    assert vcd.signals is None


def test_timescale(simple_vcd, make_vcd):
    assert VCD(simple_vcd).get_timescale() == '1ns'
    vcd = VCD(make_vcd(HEADER))
    assert vcd.get_timescale() == '1ps'
    assert vcd.get_timescale_quantity() == ureg.Quantity(1, 'ps')
    vcd = VCD(make_vcd('$timescale\n 10\n us\n$end\n$enddefinitions $end\n', name='multi.vcd'))
    assert vcd.get_timescale() == '10 us'
    assert vcd.get_timescale_quantity() == ureg.Quantity(10, 'us')


def test_missing_timescale(make_vcd):
    vcd = VCD(make_vcd('$enddefinitions $end\n'))
    with pytest.raises(VCDFormatError):
        vcd.get_timescale()


def test_last_time(simple_vcd):
    vcd = VCD(simple_vcd)
    assert vcd.get_last_time() == 40
    assert vcd.get_last_time() == 40


def test_last_time_in_large_file(make_vcd):
    lines = []
    for t in range(0, 12345, 5):
        lines.append(f'#{t}')
        lines.append(f'b{t % 256:08b} %')
    lines.append('#12345')
    # Far more than the first tail after the last time
    lines += ['1&', '0&'] * 3000
    vcd = VCD(make_vcd(HEADER + '\n'.join(lines) + '\n'))
    assert vcd.get_last_time() == 12345


@pytest.mark.parametrize('initial_tail', [1, 7, 64, 1000, 10 ** 9])
def test_last_time_independent_of_tail(make_vcd, initial_tail):
    lines = []
    for t in range(100):
        lines.append(f'#{t * 3}')
        lines.append('b1 %')
    lines.append('#12345')
    lines.append('1&')
    vcd = VCD(make_vcd(HEADER + '\n'.join(lines) + '\n'), initial_tail=initial_tail)
    assert vcd.get_last_time() == 12345


def test_last_time_ignores_partial_lines(make_vcd):
    # A window starting inside 'b01 #3' must not read '#3' as a time
    header = HEADER.replace('$var wire 1 & clk $end', '$var wire 2 #3 bus [1:0] $end')
    vcd = VCD(make_vcd(header + '#7\n' + 'b01 #3\n' * 50), initial_tail=2)
    assert vcd.get_last_time() == 7


def test_no_times(make_vcd):
    vcd = VCD(make_vcd(HEADER + '1&\n0&\n'))
    with pytest.raises(VCDFormatError, match='No times'):
        vcd.get_last_time()


def test_signal_name_to_symbol(simple_vcd):
    vcd = VCD(simple_vcd)
    assert vcd.signal_name_to_symbol('count', SignalType.wire) == '"'
    assert vcd.signal_name_to_symbol('count', SignalType.reg) is None
    assert vcd.signal_name_to_symbol('missing', SignalType.reg) is None


def test_times_signal_is_value(simple_vcd):
    vcd = VCD(simple_vcd)
    assert vcd.times_signal_is_value('!', 1) == [10, 30]
    assert vcd.times_signal_is_value('"', 3) == [30]


def test_sections(simple_vcd):
    vcd = VCD(simple_vcd)
    header = list(vcd.header_lines())
    assert header[0] == '$date'
    assert header[-1] == '$upscope $end'
    assert list(vcd.initial_value_lines()) == ['0!', 'b0000 "', 'b00 #']
    values = list(vcd.value_lines())
    assert values[0] == '#0'
    assert len(values) == 19
