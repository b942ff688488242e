#!/usr/bin/env python3
"""
Go staging backend - compiles, zips and checksums commands with the Go
toolchain via subprocess.
"""

import hashlib
import os
import re
import subprocess
import zipfile
from pathlib import Path

from .base import StagingBackend
from ..deployment.utils import debug
from ..errors import ConfigError

MODULE_PATTERN = re.compile(r'^\s*module\s+"?([^\s"]+)"?', re.MULTILINE)


def read_module_identity(go_mod_path='go.mod'):
    """Module path declared in go.mod, used as the source module tag."""
    path = Path(go_mod_path)
    if not path.exists():
        raise ConfigError(f"go.mod not found: {go_mod_path}")
    match = MODULE_PATTERN.search(path.read_text())
    if not match:
        raise ConfigError(f"No module directive in {go_mod_path}")
    return match.group(1)


class GoStaging(StagingBackend):
    """Runs `go build` and the command binaries inside a staging directory."""

    def __init__(self, staging_dir, go_binary='go', runner=subprocess.run):
        self.staging_dir = Path(staging_dir)
        self.go_binary = go_binary
        self._run = runner

    def _target(self, output):
        """Outputs are plain file names inside the staging area."""
        if Path(output).name != output:
            raise ValueError(f"output must be a file name, got: {output}")
        self.staging_dir.mkdir(parents=True, exist_ok=True)
        return self.staging_dir / output

    def _run_command(self, cmd, env_overrides=None):
        """Execute a command and raise with its stderr if it fails."""
        env = os.environ.copy()
        if env_overrides:
            env.update(env_overrides)
        debug(f"Running: {' '.join(cmd)}")
        result = self._run(cmd, env=env, capture_output=True, text=True)
        if result.returncode != 0:
            raise RuntimeError(f"Command failed: {' '.join(cmd)}: {result.stderr.strip()}")
        return result.stdout

    def get_file(self, file_name):
        full_path = self.staging_dir / file_name
        if not full_path.exists():
            raise FileNotFoundError(f"file {file_name} does not exist in staging area")
        return full_path

    def compile(self, source, output):
        target = self._target(output)
        self._run_command([self.go_binary, 'build', '-o', str(target), str(source)])
        return target

    def cross_compile(self, source, output, target_os, target_arch):
        target = self._target(output)
        self._run_command(
            [self.go_binary, 'build', '-o', str(target), str(source)],
            {'GOOS': target_os, 'GOARCH': target_arch},
        )
        return target

    def zip(self, input_path, output):
        target = self._target(output)
        with zipfile.ZipFile(target, 'w', zipfile.ZIP_DEFLATED) as zipf:
            zipf.write(input_path, arcname=Path(input_path).name)
        return target

    def checksum(self, file_name):
        sha256 = hashlib.sha256()
        with open(self.get_file(file_name), 'rb') as f:
            for chunk in iter(lambda: f.read(65536), b''):
                sha256.update(chunk)
        return sha256.hexdigest()

    def generate_template(self, binary, output, handler, bucket, key):
        target = self._target(output)
        self._run_command([
            str(binary), 'deployment', 'generate',
            '--template', str(target),
            '--s3bucket', bucket,
            '--s3key', key,
            '--handler', handler,
        ])
        return target
