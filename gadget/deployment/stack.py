#!/usr/bin/env python3
"""
CloudFormation stack driver.

Answers whether a stack exists and in which state, and drives create/update
to completion by polling describe_stacks at a fixed interval.
"""

import json
import time
from collections import namedtuple

from botocore.exceptions import ClientError

from .utils import debug
from ..errors import StackFailedError, StackNotFoundError, StackTimeoutError

STACK_NOT_FOUND = 'NotFound'

CREATE_COMPLETE = 'CREATE_COMPLETE'
CREATE_IN_PROGRESS = 'CREATE_IN_PROGRESS'
UPDATE_COMPLETE = 'UPDATE_COMPLETE'
UPDATE_IN_PROGRESS = 'UPDATE_IN_PROGRESS'
UPDATE_COMPLETE_CLEANUP_IN_PROGRESS = 'UPDATE_COMPLETE_CLEANUP_IN_PROGRESS'

CREATE_TRANSITIONS = ((CREATE_COMPLETE,), (CREATE_IN_PROGRESS,))
UPDATE_TRANSITIONS = (
    (UPDATE_COMPLETE,),
    (UPDATE_IN_PROGRESS, UPDATE_COMPLETE_CLEANUP_IN_PROGRESS),
)

DEFAULT_POLL_INTERVAL = 10

DeploymentStatus = namedtuple('DeploymentStatus', ['found', 'successful', 'status'])


def _is_missing_stack(error):
    code = error.response.get('Error', {}).get('Code', '')
    message = error.response.get('Error', {}).get('Message', '')
    return code == 'ValidationError' and 'does not exist' in message


def _is_no_update(error):
    message = error.response.get('Error', {}).get('Message', '')
    return 'No updates are to be performed' in message


class CloudFormationStack:
    """boto3-backed CloudFormation driver."""

    def __init__(self, config=None, client=None, sleep=time.sleep, clock=time.monotonic):
        config = config or {}
        self.region = config.get('region')
        self.endpoint_url = config.get('endpoint_url')
        self.capabilities = list(config.get('capabilities', ['CAPABILITY_IAM']))
        self.poll_interval = config.get('poll_interval', DEFAULT_POLL_INTERVAL)
        self.poll_timeout = config.get('poll_timeout')
        self._client = client
        self._sleep = sleep
        self._clock = clock

    def _get_client(self):
        """Lazy initialization of boto3 client."""
        if self._client is None:
            import boto3
            self._client = boto3.client(
                'cloudformation',
                region_name=self.region,
                endpoint_url=self.endpoint_url,
            )
        return self._client

    def get_deployment_status(self, name):
        """Look up a stack. A missing stack is reported, not raised."""
        client = self._get_client()
        try:
            response = client.describe_stacks(StackName=name)
        except ClientError as e:
            if _is_missing_stack(e):
                return DeploymentStatus(False, False, STACK_NOT_FOUND)
            raise

        stacks = response.get('Stacks', [])
        if not stacks:
            return DeploymentStatus(False, False, STACK_NOT_FOUND)
        status = stacks[0]['StackStatus']
        return DeploymentStatus(True, status == CREATE_COMPLETE, status)

    def _describe(self, name):
        """describe_stacks for a stack that must exist."""
        try:
            response = self._get_client().describe_stacks(StackName=name)
        except ClientError as e:
            if _is_missing_stack(e):
                raise StackNotFoundError(name) from e
            raise
        return response.get('Stacks', [])

    def wait_for_stack(self, name, transitions, operation, timeout=None):
        """
        Poll until the stack reaches a terminal status.

        transitions is (success_statuses, in_progress_statuses). Any other
        status is a failure. Client errors are not retried.
        """
        success, in_progress = transitions
        if timeout is None:
            timeout = self.poll_timeout
        started = self._clock()

        while True:
            stacks = self._describe(name)
            if not stacks:
                raise StackNotFoundError(name)

            status = stacks[0]['StackStatus']
            if status in success:
                print(f"[OK] Stack {name}: {status}")
                return status
            if status not in in_progress:
                raise StackFailedError(name, status, operation)

            if timeout is not None and self._clock() - started >= timeout:
                raise StackTimeoutError(name, status, timeout)
            debug(f"Stack {name}: {status}, waiting {self.poll_interval}s")
            self._sleep(self.poll_interval)

    def deploy_template_as_bytes(self, name, data, timeout=None):
        """Create a new stack and wait for CREATE_COMPLETE."""
        client = self._get_client()
        print(f"Creating stack: {name}")
        client.create_stack(
            StackName=name,
            TemplateBody=data.decode('utf-8') if isinstance(data, bytes) else data,
            Capabilities=self.capabilities,
        )
        return self.wait_for_stack(name, CREATE_TRANSITIONS, 'creation', timeout)

    def deploy_template_as_file(self, name, file_path, timeout=None):
        with open(file_path, 'rb') as f:
            data = f.read()
        return self.deploy_template_as_bytes(name, data, timeout)

    def update_template_as_bytes(self, name, data, timeout=None):
        """Update an existing stack and wait for UPDATE_COMPLETE."""
        client = self._get_client()
        print(f"Updating stack: {name}")
        try:
            client.update_stack(
                StackName=name,
                TemplateBody=data.decode('utf-8') if isinstance(data, bytes) else data,
                Capabilities=self.capabilities,
            )
        except ClientError as e:
            if _is_no_update(e):
                print(f"[OK] Stack {name} is already up to date")
                return None
            raise
        return self.wait_for_stack(name, UPDATE_TRANSITIONS, 'update', timeout)

    def update_template_as_file(self, name, file_path, timeout=None):
        with open(file_path, 'rb') as f:
            data = f.read()
        return self.update_template_as_bytes(name, data, timeout)

    def load_template(self, name):
        """Return the deployed template body as bytes."""
        response = self._get_client().get_template(StackName=name)
        body = response['TemplateBody']
        if isinstance(body, dict):
            # boto3 parses JSON template bodies
            body = json.dumps(body)
        return body.encode('utf-8')

    def get_outputs(self, name):
        """Return the stack's outputs as {OutputKey: OutputValue}."""
        stacks = self._describe(name)
        if not stacks:
            raise StackNotFoundError(name)
        return {
            output['OutputKey']: output.get('OutputValue')
            for output in stacks[0].get('Outputs', [])
        }
