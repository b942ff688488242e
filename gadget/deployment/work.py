#!/usr/bin/env python3
"""
Workspace commands: create gadget.yaml, register commands, set tags.
"""

from ..config.application import (
    ApplicationConfig, Command, command_name_from_path,
    load_application_config, save_application_config
)


def init_command(workspace, application_name):
    config = ApplicationConfig(application_name)
    path = save_application_config(config, workspace.application_config_path)
    print(f"[OK] Initialized application '{application_name}' in {path}")
    return config


def use_command(workspace, source_path):
    """Register a command; its name is the source file name without extension."""
    config = load_application_config(workspace.application_config_path)
    command = Command(command_name_from_path(source_path), source_path)
    config.add_command(command)
    save_application_config(config, workspace.application_config_path)
    print(f"[OK] Added command '{command.name}' ({source_path})")
    return command


def set_tag_command(workspace, key, value):
    config = load_application_config(workspace.application_config_path)
    config.set_tag(key, value)
    save_application_config(config, workspace.application_config_path)
    print(f"[OK] Tag {key}={value}")
    return config
