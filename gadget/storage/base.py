#!/usr/bin/env python3
"""
Base storage backend interface for command artifacts.
"""


class StorageBackend:
    """Base interface for storage backends."""

    def upload_file(self, local_path, bucket, key):
        """Upload a local file to bucket/key. Returns its URL."""
        raise NotImplementedError

    def create_file(self, content, bucket, key):
        """Store a string or bytes payload at bucket/key. Returns its URL."""
        raise NotImplementedError

    def get_url(self, bucket, key):
        raise NotImplementedError
