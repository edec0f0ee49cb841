"""
User configuration for vcdprobe.

Settings are read from a YAML file and merged over DEFAULT_CONFIG:

    num_bins: 400
    histogram_dir: sim_data/histograms
    report_each_step: true
"""

import copy
from pathlib import Path

import yaml

from vcdprobe.utils import append_dict

DEFAULT_CONFIG = {
    # Number of toggle-count bins per histogram (.25% toggle rate bins)
    'num_bins': 400,
    # Widest signal the fully-expressed filter enumerates
    'max_width': 28,
    # First tail window (in characters) searched for the last time
    'initial_tail': 1000,
    'histogram_dir': '.',
    'write_histograms': True,
    'print_values': False,
    'report_each_step': False,
    'log_level': 'INFO',
}


def load_config(config_file: str | Path | None = None) -> dict:
    """
    Return the default configuration, updated with the content of config_file

    Args:
        config_file: Optional path to a YAML file

    Raises:
        ValueError: if the file holds anything but a mapping of known keys
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_file is None:
        return config

    with open(config_file, 'r') as f:
        user_config = yaml.safe_load(f) or {}

    if not isinstance(user_config, dict):
        raise ValueError(f'Configuration file {config_file} must contain a mapping')
    unknown = set(user_config) - set(DEFAULT_CONFIG)
    if unknown:
        raise ValueError(f'Unknown configuration keys in {config_file}: {", ".join(sorted(unknown))}')

    return append_dict(config, user_config)
