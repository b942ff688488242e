#!/usr/bin/env python3
"""S3 storage backend for command artifacts."""

from .base import StorageBackend


class S3Storage(StorageBackend):
    """S3 storage backend. Credentials come from boto3's default chain."""

    def __init__(self, config, client=None):
        self.region = config.get('region')
        self.endpoint_url = config.get('endpoint_url')
        self._client = client

    def _get_client(self):
        """Lazy initialization of boto3 client."""
        if self._client is None:
            import boto3
            self._client = boto3.client(
                's3',
                endpoint_url=self.endpoint_url,
                region_name=self.region
            )
        return self._client

    def get_url(self, bucket, key):
        if self.region:
            return f"https://{bucket}.s3.{self.region}.amazonaws.com/{key}"
        return f"s3://{bucket}/{key}"

    def upload_file(self, local_path, bucket, key):
        s3_client = self._get_client()
        print(f"Uploading to S3: s3://{bucket}/{key}")
        s3_client.upload_file(str(local_path), bucket, key)
        print("[OK] Uploaded")
        return self.get_url(bucket, key)

    def create_file(self, content, bucket, key):
        if isinstance(content, str):
            content = content.encode('utf-8')
        self._get_client().put_object(Bucket=bucket, Key=key, Body=content)
        return self.get_url(bucket, key)
