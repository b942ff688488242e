#!/usr/bin/env python3
"""
Deployment utilities - shared helper functions.
"""

import sys
from pathlib import Path

import yaml

_verbose = False


def set_verbose(enabled):
    global _verbose
    _verbose = bool(enabled)


def debug(message):
    """Print step detail only when --verbose is on."""
    if _verbose:
        print(f"  {message}")


def error(message):
    print(f"ERROR: {message}", file=sys.stderr)


def print_phase(phase_name):
    """Helper to print phase headers."""
    print(f"\n{'='*60}")
    print(phase_name)
    print(f"{'='*60}")


def load_yaml(file_path):
    with open(file_path, 'r') as f:
        return yaml.safe_load(f)


def save_yaml(data, output_path):
    Path(output_path).parent.mkdir(exist_ok=True, parents=True)
    with open(output_path, 'w') as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    return str(output_path)


def deep_merge(base, override):
    """Deep merge override dict into base dict."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result
