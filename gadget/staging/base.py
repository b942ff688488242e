#!/usr/bin/env python3
"""
Base staging interface: builds and packages one command inside a staging
directory.
"""


class StagingBackend:
    """Interface for build/package backends."""

    def get_file(self, file_name):
        """Full path of a file in the staging area; it must exist."""
        raise NotImplementedError

    def compile(self, source, output):
        """Build source for the local machine into staging/output."""
        raise NotImplementedError

    def cross_compile(self, source, output, target_os, target_arch):
        """Build source for the Lambda runtime into staging/output."""
        raise NotImplementedError

    def zip(self, input_path, output):
        """Zip a single file into staging/output."""
        raise NotImplementedError

    def checksum(self, file_name):
        """Checksum of a staged file."""
        raise NotImplementedError

    def generate_template(self, binary, output, handler, bucket, key):
        """Ask a compiled command to write its CloudFormation template."""
        raise NotImplementedError
