import logging
import os
import sys

import pytest

# Add src to python path so we can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

CONFIG_DIR = os.path.join(os.path.dirname(__file__), 'configs')


@pytest.fixture
def config_dir():
    return CONFIG_DIR


@pytest.fixture
def writable_config(tmp_path):
    """Copy of valid_config.yml that tests may modify."""
    path = tmp_path / 'config.yml'
    with open(os.path.join(CONFIG_DIR, 'valid_config.yml'), 'r', encoding='utf-8') as f:
        path.write_text(f.read(), encoding='utf-8')
    return str(path)


@pytest.fixture(autouse=True)
def reset_package_log_level():
    """Loading a config changes the package log level; undo it between tests."""
    yield
    logging.getLogger('OverviewColors').setLevel(logging.NOTSET)
