#!/usr/bin/env python3
"""
Bootstrap configuration (.gadget/bootstrap.yaml): where command artifacts go.
"""

from pathlib import Path

from ..deployment.utils import load_yaml, save_yaml
from ..errors import ConfigError


class Bootstrap:

    def __init__(self, s3_bucket_name):
        self.s3_bucket_name = s3_bucket_name

    def to_dict(self):
        return {'s3_bucket_name': self.s3_bucket_name}


def load_bootstrap(file_path):
    if not Path(file_path).exists():
        raise ConfigError(f"Bootstrap config not found: {file_path} (run 'gadget bootstrap' first)")
    data = load_yaml(file_path) or {}
    bucket = data.get('s3_bucket_name')
    if not bucket:
        raise ConfigError(f"Bootstrap config {file_path} has no s3_bucket_name")
    return Bootstrap(bucket)


def save_bootstrap(bootstrap, file_path):
    return save_yaml(bootstrap.to_dict(), file_path)
