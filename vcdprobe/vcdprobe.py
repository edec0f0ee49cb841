import click

from vcdprobe.config import load_config
from vcdprobe.counters import CounterDetector
from vcdprobe.errors import VCDError
from vcdprobe.histogram import ProgressHistogram
from vcdprobe.logging import set_log_level
from vcdprobe.vcd import VCD

SEPARATOR = '########################'


def _vcd_file():
    return click.argument('vcd_file', type=click.Path(exists=True, dir_okay=False))


@click.group()
@click.option('--config', 'config_file', type=click.Path(exists=True, dir_okay=False),
              help='YAML configuration file')
@click.option('--log-level', type=str, default=None,
              help='DEBUG, INFO, WARNING, ERROR or SILENT')
@click.pass_context
def cli(ctx, config_file, log_level):
    """ Value Change Dump analysis: toggle histograms and counter detection """
    try:
        config = load_config(config_file)
        if log_level is not None:
            config['log_level'] = log_level
        set_log_level(config['log_level'])
    except ValueError as err:
        raise click.ClickException(str(err))
    ctx.obj = config


@cli.command()
@_vcd_file()
@click.pass_obj
def info(config, vcd_file):
    """ Print the timescale, last time and number of signals of VCD_FILE """
    try:
        with VCD(vcd_file, initial_tail=config['initial_tail']) as vcd:
            click.echo(f'Timescale: {vcd.get_timescale()}')
            click.echo(f'Last time: {vcd.get_last_time()}')
            click.echo(f'Signals: {len(vcd.create_symbol_table())}')
    except VCDError as err:
        raise click.ClickException(str(err))


@cli.command()
@_vcd_file()
@click.option('--print-values', is_flag=True,
              help='Print all values of every possible counter')
@click.option('--report-each-step', is_flag=True,
              help='Report the suspects after every step')
@click.pass_obj
def counters(config, vcd_file, print_values, report_each_step):
    """ Look for signals in VCD_FILE that may be counters """
    print_values = print_values or config['print_values']
    report_each_step = report_each_step or config['report_each_step']
    try:
        with VCD(vcd_file, complete_history=True) as vcd:
            vcd.read_values_from_vcd()
            click.echo(f'Signals: {len(vcd.signals)}')
            detector = CounterDetector(vcd.signals.values(), max_width=config['max_width'])
            report = detector.run(report_each_step=report_each_step)
    except VCDError as err:
        raise click.ClickException(str(err))
    for line in report.lines(print_values=print_values):
        click.echo(line)


@cli.command()
@_vcd_file()
@click.option('--bins', type=int, default=None, help='Number of toggle count bins')
@click.option('--output-dir', type=click.Path(file_okay=False), default=None,
              help='Directory for the hist_<percent>.txt files')
@click.option('--no-write', is_flag=True, help='Do not write histogram files')
@click.pass_obj
def histogram(config, vcd_file, bins, output_dir, no_write):
    """ Write a toggle histogram of VCD_FILE for every percent of simulated time """
    try:
        with VCD(vcd_file, initial_tail=config['initial_tail']) as vcd:
            last_time = vcd.get_last_time()
            click.echo(SEPARATOR)
            click.echo(vcd.get_timescale())
            click.echo(SEPARATOR)
            click.echo(f'Last time: {last_time}')
            click.echo(SEPARATOR)
            reporter = ProgressHistogram(
                vcd,
                last_time,
                num_bins=bins or config['num_bins'],
                output_dir=output_dir or config['histogram_dir'],
                write_files=config['write_histograms'] and not no_write,
                keep=False,
            )
            vcd.set_time_update_callback(reporter)
            vcd.read_values_from_vcd()
            click.echo(SEPARATOR)
    except VCDError as err:
        raise click.ClickException(str(err))


@cli.command()
@_vcd_file()
@click.option('--section', type=click.Choice(['header', 'initial', 'values']), default='header',
              help='Section of the file to print')
@click.pass_obj
def dump(config, vcd_file, section):
    """ Print one section of VCD_FILE """
    try:
        with VCD(vcd_file) as vcd:
            lines = {
                'header': vcd.header_lines,
                'initial': vcd.initial_value_lines,
                'values': vcd.value_lines,
            }[section]()
            for line in lines:
                click.echo(line)
    except VCDError as err:
        raise click.ClickException(str(err))
