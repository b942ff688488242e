#!/usr/bin/env python3
"""
Workspace layout and tool settings.

Settings are built-in defaults, deep-merged with .gadget/settings.yaml and,
when GADGET_ENV=local, with .gadget/settings.local.yaml on top.
"""

import os
from pathlib import Path

from ..deployment.utils import deep_merge, load_yaml
from ..errors import ConfigError

DEFAULT_SETTINGS = {
    'region': None,
    'endpoint_url': None,
    'storage_backend': 's3',
    'local_storage_dir': '.gadget/buckets',
    'poll_interval': 10,
    'poll_timeout': None,
    'capabilities': ['CAPABILITY_IAM'],
    'target_os': 'linux',
    'target_arch': 'amd64',
    'bootstrap_stack_name': 'gadget-init',
    'template_name': 'cloudformation.yaml',
    'verbose': False,
}


class Workspace:
    """File locations of a gadget workspace rooted at a directory."""

    def __init__(self, root='.'):
        self.root = Path(root)
        self.application_config_path = self.root / 'gadget.yaml'
        self.work_path = self.root / '.gadget'
        self.staging_path = self.work_path / 'staging'
        self.bootstrap_path = self.work_path / 'bootstrap.yaml'
        self.settings_path = self.work_path / 'settings.yaml'
        self.local_settings_path = self.work_path / 'settings.local.yaml'
        self.go_mod_path = self.root / 'go.mod'

    def ensure_staging(self):
        self.staging_path.mkdir(parents=True, exist_ok=True)
        return self.staging_path


def _load_override(path):
    data = load_yaml(path) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a YAML mapping")
    return data


def load_settings(workspace):
    """Load settings with optional file and local overrides."""
    settings = dict(DEFAULT_SETTINGS)

    if workspace.settings_path.exists():
        settings = deep_merge(settings, _load_override(workspace.settings_path))

    env = os.environ.get('GADGET_ENV', '').strip()
    if env == 'local' and workspace.local_settings_path.exists():
        settings = deep_merge(settings, _load_override(workspace.local_settings_path))

    return settings
