#!/usr/bin/env python3
"""
Local storage backend for dry runs - mirrors buckets into a directory.
"""

import shutil
from pathlib import Path

from .base import StorageBackend


class LocalStorage(StorageBackend):
    """Copies artifacts into <storage_dir>/<bucket>/<key>."""

    def __init__(self, config):
        self.storage_dir = Path(config.get('local_storage_dir', '.gadget/buckets'))

    def _target(self, bucket, key):
        target = self.storage_dir / bucket / key
        target.parent.mkdir(parents=True, exist_ok=True)
        return target

    def get_url(self, bucket, key):
        return f"file://{(self.storage_dir / bucket / key).resolve()}"

    def upload_file(self, local_path, bucket, key):
        print(f"Copying to local bucket: {bucket}/{key}")
        shutil.copy2(local_path, self._target(bucket, key))
        return self.get_url(bucket, key)

    def create_file(self, content, bucket, key):
        target = self._target(bucket, key)
        if isinstance(content, str):
            content = content.encode('utf-8')
        target.write_bytes(content)
        return self.get_url(bucket, key)
