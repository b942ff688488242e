"""
Storage backend abstraction package.

This package provides abstraction for different storage backends
(S3, local filesystem) for command artifacts.
"""

from .local import LocalStorage
from .s3 import S3Storage
from ..errors import ConfigError


def get_storage_backend(config):
    """Factory function to get appropriate storage backend."""
    storage_mode = config.get('storage_backend', 's3')

    if storage_mode == 'local':
        return LocalStorage(config)
    elif storage_mode == 's3':
        return S3Storage(config)
    else:
        raise ConfigError(f"Unknown storage backend: {storage_mode}")


__all__ = ['LocalStorage', 'S3Storage', 'get_storage_backend']
