"""Configuration loading for local replays of CI runs."""

from qodana_ci.config.loader import load_inputs_file

__all__ = ["load_inputs_file"]
