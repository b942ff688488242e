#!/usr/bin/env python3
"""
Application config validation.
Validates gadget.yaml against the JSON schema, then checks the commands.
"""

import json
from pathlib import Path

import jsonschema
import yaml

SCHEMA_FILE = Path(__file__).parent / 'schemas' / 'application-schema.json'


def load_yaml(file_path):
    """Load YAML file safely."""
    try:
        with open(file_path, 'r') as f:
            return yaml.safe_load(f), None
    except yaml.YAMLError as e:
        return None, str(e)
    except OSError as e:
        return None, str(e)


def validate_against_schema(data):
    """
    Validate application config against the JSON schema.
    Returns (is_valid, errors_list)
    """
    try:
        with open(SCHEMA_FILE, 'r') as f:
            schema = json.load(f)
    except (OSError, ValueError) as e:
        return False, [f"Error loading schema file: {e}"]

    try:
        jsonschema.validate(instance=data, schema=schema)
        return True, []
    except jsonschema.ValidationError as e:
        error_path = ' -> '.join(str(p) for p in e.path) if e.path else 'root'
        return False, [f"Schema validation failed at '{error_path}': {e.message}"]
    except jsonschema.SchemaError as e:
        return False, [f"Schema file is invalid: {e.message}"]


def check_commands(data, root):
    """Command names must be unique and their sources must exist."""
    errors = []
    seen = set()
    for i, command in enumerate(data.get('commands') or []):
        name = command['name']
        if name in seen:
            errors.append(f"Command {i}: duplicate name '{name}'")
        seen.add(name)

        source = Path(root) / command['path']
        if not source.exists():
            errors.append(f"Command {i} ({name}): source not found: {command['path']}")
    return errors


def validate_application_config(config_file, root=None):
    """
    Validate a gadget.yaml file.
    Returns (is_valid, errors_list)
    """
    config_path = Path(config_file)
    if root is None:
        root = config_path.parent

    if not config_path.exists():
        return False, [f"File not found: {config_file}"]

    data, err = load_yaml(config_path)
    if err:
        return False, [f"YAML syntax error: {err}"]

    if not data:
        return False, ["Application config is empty"]

    is_valid, schema_errors = validate_against_schema(data)
    if not is_valid:
        return False, schema_errors

    errors = check_commands(data, root)
    return len(errors) == 0, errors
