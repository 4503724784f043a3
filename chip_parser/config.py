import os
import json


def get_config_path():
    """Config file location, overridable through CHIP_PARSER_CONFIG"""
    return os.getenv('CHIP_PARSER_CONFIG') or os.path.join(os.path.dirname(__file__), 'config.json')


def load_config():
    """Load parser configuration, empty if missing or unreadable"""
    try:
        with open(get_config_path(), 'r', encoding='utf-8') as f:
            config = json.load(f)
    except (OSError, ValueError):
        return {}
    return config if isinstance(config, dict) else {}


def get_testing_mode():
    """Check if testing mode is enabled"""
    return bool(load_config().get('testing_mode', False))
