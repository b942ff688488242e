#!/usr/bin/env python3
"""
Application configuration (gadget.yaml): the application name, the ordered
list of commands it deploys, and user tags.
"""

from pathlib import Path

from ..deployment.utils import load_yaml, save_yaml
from ..errors import ConfigError


class Command:
    """One deployable Go command."""

    def __init__(self, name, path):
        self.name = name
        self.path = path

    def __eq__(self, other):
        return isinstance(other, Command) and (self.name, self.path) == (other.name, other.path)

    def __repr__(self):
        return f"Command(name={self.name!r}, path={self.path!r})"

    def to_dict(self):
        return {'name': self.name, 'path': self.path}


def command_name_from_path(path):
    """cmd/hello/main.go -> main, tools/hello.go -> hello."""
    return Path(path).stem


class ApplicationConfig:

    def __init__(self, name, commands=None, tags=None):
        self.name = name
        self.commands = list(commands or [])
        self.tags = dict(tags or {})

    def add_command(self, command):
        for existing in self.commands:
            if existing.name == command.name:
                raise ConfigError(f"command {command.name} already exists")
        self.commands.append(command)

    def set_tag(self, key, value):
        self.tags[key] = value

    def to_dict(self):
        return {
            'name': self.name,
            'commands': [command.to_dict() for command in self.commands],
            'tags': dict(self.tags),
        }

    @classmethod
    def from_dict(cls, data):
        commands = [Command(c['name'], c['path']) for c in data.get('commands') or []]
        return cls(data['name'], commands, data.get('tags') or {})


def load_application_config(file_path):
    if not Path(file_path).exists():
        raise ConfigError(f"Application config not found: {file_path} (run 'gadget work init <name>' first)")
    data = load_yaml(file_path)
    if not isinstance(data, dict) or 'name' not in data:
        raise ConfigError(f"Application config {file_path} has no name")
    return ApplicationConfig.from_dict(data)


def save_application_config(config, file_path):
    return save_yaml(config.to_dict(), file_path)
