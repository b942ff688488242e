"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest
import yaml
from botocore.exceptions import ClientError

from gadget.config.settings import DEFAULT_SETTINGS, Workspace
from gadget.deployment.utils import set_verbose


def missing_stack_error(name):
    return ClientError(
        {'Error': {'Code': 'ValidationError', 'Message': f'Stack with id {name} does not exist'}},
        'DescribeStacks',
    )


class FakeCloudFormationClient:
    """
    Scripted stand-in for the boto3 CloudFormation client.

    describe_stacks returns the queued statuses in order and keeps returning
    the last one. None in the queue means "no stacks in the response".
    """

    def __init__(self, statuses=(), missing=False, outputs=None, template_body=''):
        self.statuses = list(statuses)
        self.missing = missing
        self.outputs = outputs or {}
        self.template_body = template_body
        self.calls = []

    def describe_stacks(self, StackName):
        self.calls.append(('describe_stacks', StackName))
        if self.missing:
            raise missing_stack_error(StackName)
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        if status is None:
            return {'Stacks': []}
        return {'Stacks': [{
            'StackName': StackName,
            'StackStatus': status,
            'Outputs': [{'OutputKey': k, 'OutputValue': v} for k, v in self.outputs.items()],
        }]}

    def create_stack(self, **kwargs):
        self.calls.append(('create_stack', kwargs))
        self.missing = False
        return {'StackId': f"arn:aws:cloudformation:::stack/{kwargs['StackName']}"}

    def update_stack(self, **kwargs):
        self.calls.append(('update_stack', kwargs))
        return {'StackId': f"arn:aws:cloudformation:::stack/{kwargs['StackName']}"}

    def get_template(self, StackName):
        self.calls.append(('get_template', StackName))
        return {'TemplateBody': self.template_body}

    def call_names(self):
        return [call[0] for call in self.calls]


class FakeStaging:
    """Build collaborator that writes placeholder files instead of running go."""

    def __init__(self, staging_dir, documents, fail_on=None):
        self.staging_dir = Path(staging_dir)
        self.staging_dir.mkdir(parents=True, exist_ok=True)
        self.documents = documents
        self.fail_on = fail_on
        self.calls = []

    def _write(self, name, content=b'binary'):
        path = self.staging_dir / name
        path.write_bytes(content)
        return path

    def get_file(self, file_name):
        return self.staging_dir / file_name

    def compile(self, source, output):
        self.calls.append(('compile', source, output))
        return self._write(output)

    def cross_compile(self, source, output, target_os, target_arch):
        self.calls.append(('cross_compile', source, output, target_os, target_arch))
        if output == self.fail_on:
            raise RuntimeError(f"Command failed: go build {source}")
        return self._write(output)

    def zip(self, input_path, output):
        self.calls.append(('zip', str(input_path), output))
        return self._write(output)

    def checksum(self, file_name):
        self.calls.append(('checksum', file_name))
        return 'abc123'

    def generate_template(self, binary, output, handler, bucket, key):
        self.calls.append(('generate_template', str(binary), output, handler, bucket, key))
        path = self.staging_dir / output
        path.write_text(yaml.safe_dump(self.documents[handler]))
        return path


class FakeStorage:

    def __init__(self):
        self.files = {}
        self.uploads = []

    def create_file(self, content, bucket, key):
        self.files[(bucket, key)] = content
        return f"s3://{bucket}/{key}"

    def upload_file(self, local_path, bucket, key):
        self.uploads.append((str(local_path), bucket, key))
        return f"s3://{bucket}/{key}"


def command_document(name, extra_resources=None):
    """Template a command binary would generate for itself."""
    resources = {
        f"{name}Function": {
            'Type': 'AWS::Lambda::Function',
            'Properties': {
                'Handler': name,
                'Role': {'Fn::GetAtt': [f"{name}Role", 'Arn']},
                'Tags': [{'Key': 'owner', 'Value': name}],
            },
        },
        f"{name}Role": {
            'Type': 'AWS::IAM::Role',
            'Properties': {'Tags': []},
        },
    }
    resources.update(extra_resources or {})
    return {
        'AWSTemplateFormatVersion': '2010-09-09',
        'Parameters': {'Stage': {'Type': 'String', 'Default': name}},
        'Resources': resources,
    }


@pytest.fixture(autouse=True)
def quiet():
    set_verbose(False)
    yield
    set_verbose(False)


@pytest.fixture
def settings():
    result = dict(DEFAULT_SETTINGS)
    result['poll_interval'] = 0
    return result


@pytest.fixture
def workspace(tmp_path):
    """A workspace with two commands, a go.mod and a bootstrap config."""
    ws = Workspace(tmp_path)
    for name in ('hello', 'world'):
        source = tmp_path / 'cmd' / name / f"{name}.go"
        source.parent.mkdir(parents=True)
        source.write_text('package main\n')

    (tmp_path / 'go.mod').write_text('module github.com/example/app\n\ngo 1.21\n')
    ws.application_config_path.write_text(yaml.safe_dump({
        'name': 'my-app',
        'commands': [
            {'name': 'hello', 'path': 'cmd/hello/hello.go'},
            {'name': 'world', 'path': 'cmd/world/world.go'},
        ],
        'tags': {'team': 'platform'},
    }))
    ws.work_path.mkdir()
    ws.bootstrap_path.write_text(yaml.safe_dump({'s3_bucket_name': 'deploy-bucket'}))
    return ws
