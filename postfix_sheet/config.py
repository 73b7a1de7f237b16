"""Configuration loading for the command-line tool."""

import os

import yaml

DEFAULTS = {
    "delimiter": ",",
    "error_token": "#ERR",
    "log_level": "INFO",
    "output_format": "text",
    "sheet": None,
}

OUTPUT_FORMATS = ("text", "csv", "xlsx")


def load_config(config_path):
    """Load configuration from a YAML file, filling in defaults."""
    config = dict(DEFAULTS)
    if config_path and os.path.exists(config_path):
        with open(config_path, "r") as f:
            user_config = yaml.safe_load(f) or {}
        config.update(user_config)
    if config["output_format"] not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output_format {config['output_format']!r}; "
                         f"expected one of {', '.join(OUTPUT_FORMATS)}")
    return config
