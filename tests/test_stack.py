"""Tests for the CloudFormation stack driver."""

import datetime
import itertools

import boto3
import pytest
from botocore.exceptions import ClientError
from botocore.stub import Stubber

from conftest import FakeCloudFormationClient
from gadget.deployment.stack import (
    CREATE_TRANSITIONS, STACK_NOT_FOUND, UPDATE_TRANSITIONS, CloudFormationStack
)
from gadget.errors import StackFailedError, StackNotFoundError, StackTimeoutError


class Sleeper:

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


def make_stack(client, sleep=None, **config):
    config.setdefault('poll_interval', 10)
    return CloudFormationStack(config, client=client, sleep=sleep or Sleeper())


class TestDeploymentStatus:

    def test_missing_stack_via_stubbed_client(self):
        """A real client's 'does not exist' error reads as NotFound."""
        client = boto3.client(
            'cloudformation', region_name='us-east-1',
            aws_access_key_id='testing', aws_secret_access_key='testing',
        )
        stubber = Stubber(client)
        stubber.add_client_error(
            'describe_stacks',
            service_error_code='ValidationError',
            service_message='Stack with id my-app does not exist',
            http_status_code=400,
        )

        with stubber:
            status = CloudFormationStack(client=client).get_deployment_status('my-app')

        assert status == (False, False, STACK_NOT_FOUND)

    def test_existing_stack_via_stubbed_client(self):
        client = boto3.client(
            'cloudformation', region_name='us-east-1',
            aws_access_key_id='testing', aws_secret_access_key='testing',
        )
        stubber = Stubber(client)
        stubber.add_response('describe_stacks', {'Stacks': [{
            'StackName': 'my-app',
            'CreationTime': datetime.datetime(2024, 1, 1),
            'StackStatus': 'CREATE_COMPLETE',
        }]}, {'StackName': 'my-app'})

        with stubber:
            status = CloudFormationStack(client=client).get_deployment_status('my-app')

        assert status.found and status.successful
        assert status.status == 'CREATE_COMPLETE'

    def test_empty_stack_list_is_not_found(self):
        stack = make_stack(FakeCloudFormationClient([None]))

        assert stack.get_deployment_status('x').status == STACK_NOT_FOUND

    def test_found_but_not_successful(self):
        """Only CREATE_COMPLETE counts as successful."""
        stack = make_stack(FakeCloudFormationClient(['UPDATE_COMPLETE']))

        status = stack.get_deployment_status('x')

        assert status.found and not status.successful
        assert status.status == 'UPDATE_COMPLETE'

    def test_other_client_errors_propagate(self):
        class DeniedClient:
            def describe_stacks(self, StackName):
                raise ClientError(
                    {'Error': {'Code': 'AccessDenied', 'Message': 'no'}}, 'DescribeStacks'
                )

        with pytest.raises(ClientError):
            make_stack(DeniedClient()).get_deployment_status('x')


class TestWaitForStack:
    """Polling for create and update."""

    def test_create_polls_until_complete(self):
        """Two in-progress reads mean two sleeps of the configured interval."""
        sleeper = Sleeper()
        client = FakeCloudFormationClient(
            ['CREATE_IN_PROGRESS', 'CREATE_IN_PROGRESS', 'CREATE_COMPLETE']
        )

        status = make_stack(client, sleeper).wait_for_stack('app', CREATE_TRANSITIONS, 'creation')

        assert status == 'CREATE_COMPLETE'
        assert sleeper.calls == [10, 10]
        assert client.call_names().count('describe_stacks') == 3

    def test_create_rollback_fails_with_status(self):
        client = FakeCloudFormationClient(['CREATE_IN_PROGRESS', 'ROLLBACK_COMPLETE'])

        with pytest.raises(StackFailedError) as exc_info:
            make_stack(client).wait_for_stack('app', CREATE_TRANSITIONS, 'creation')

        assert exc_info.value.status == 'ROLLBACK_COMPLETE'
        assert 'ROLLBACK_COMPLETE' in str(exc_info.value)

    def test_update_cleanup_counts_as_in_progress(self):
        client = FakeCloudFormationClient([
            'UPDATE_IN_PROGRESS', 'UPDATE_COMPLETE_CLEANUP_IN_PROGRESS', 'UPDATE_COMPLETE'
        ])

        status = make_stack(client).wait_for_stack('app', UPDATE_TRANSITIONS, 'update')

        assert status == 'UPDATE_COMPLETE'

    def test_stack_disappears_while_polling(self):
        client = FakeCloudFormationClient(['CREATE_IN_PROGRESS', None])

        with pytest.raises(StackNotFoundError):
            make_stack(client).wait_for_stack('app', CREATE_TRANSITIONS, 'creation')

    def test_stack_deleted_while_polling(self):
        """The service's 'does not exist' error mid-poll is a StackNotFoundError."""
        client = FakeCloudFormationClient(['CREATE_IN_PROGRESS'])

        def delete_stack(seconds):
            client.missing = True

        with pytest.raises(StackNotFoundError) as exc_info:
            make_stack(client, delete_stack).wait_for_stack('app', CREATE_TRANSITIONS, 'creation')

        assert exc_info.value.name == 'app'
        assert isinstance(exc_info.value.__cause__, ClientError)

    def test_timeout(self):
        """An optional timeout stops polling a stack that never settles."""
        clock = itertools.count(0, 5).__next__
        client = FakeCloudFormationClient(['CREATE_IN_PROGRESS'])
        stack = CloudFormationStack({'poll_interval': 1}, client=client,
                                    sleep=Sleeper(), clock=clock)

        with pytest.raises(StackTimeoutError) as exc_info:
            stack.wait_for_stack('app', CREATE_TRANSITIONS, 'creation', timeout=10)

        assert exc_info.value.status == 'CREATE_IN_PROGRESS'


class TestCreateAndUpdate:

    def test_deploy_template_as_file(self, tmp_path):
        path = tmp_path / 'cloudformation.yaml'
        path.write_text('Resources: {}\n')
        client = FakeCloudFormationClient(['CREATE_COMPLETE'], missing=True)

        status = make_stack(client, capabilities=['CAPABILITY_NAMED_IAM']).deploy_template_as_file(
            'app', path
        )

        assert status == 'CREATE_COMPLETE'
        name, kwargs = client.calls[0]
        assert name == 'create_stack'
        assert kwargs['TemplateBody'] == 'Resources: {}\n'
        assert kwargs['Capabilities'] == ['CAPABILITY_NAMED_IAM']

    def test_update_template_as_bytes(self):
        client = FakeCloudFormationClient(['UPDATE_IN_PROGRESS', 'UPDATE_COMPLETE'])

        status = make_stack(client).update_template_as_bytes('app', b'Resources: {}\n')

        assert status == 'UPDATE_COMPLETE'
        assert client.call_names()[0] == 'update_stack'

    def test_update_without_changes_is_success(self):
        class NoChangeClient(FakeCloudFormationClient):
            def update_stack(self, **kwargs):
                raise ClientError({'Error': {
                    'Code': 'ValidationError', 'Message': 'No updates are to be performed.'
                }}, 'UpdateStack')

        client = NoChangeClient(['UPDATE_COMPLETE'])

        assert make_stack(client).update_template_as_bytes('app', b'{}') is None
        assert 'describe_stacks' not in client.call_names()

    def test_update_failure_propagates(self):
        class BrokenClient(FakeCloudFormationClient):
            def update_stack(self, **kwargs):
                raise ClientError({'Error': {
                    'Code': 'ValidationError', 'Message': 'Template format error'
                }}, 'UpdateStack')

        with pytest.raises(ClientError):
            make_stack(BrokenClient(['UPDATE_COMPLETE'])).update_template_as_bytes('app', b'{}')


class TestReads:

    def test_get_outputs(self):
        client = FakeCloudFormationClient(['CREATE_COMPLETE'], outputs={'DeployBucket': 'b-1'})

        assert make_stack(client).get_outputs('gadget-init') == {'DeployBucket': 'b-1'}

    def test_get_outputs_missing_stack(self):
        client = FakeCloudFormationClient(missing=True)

        with pytest.raises(StackNotFoundError):
            make_stack(client).get_outputs('gadget-init')

    def test_load_template_text(self):
        client = FakeCloudFormationClient(template_body='Resources: {}\n')

        assert make_stack(client).load_template('app') == b'Resources: {}\n'

    def test_load_template_json_body(self):
        """boto3 hands JSON bodies back as dicts."""
        client = FakeCloudFormationClient(template_body={'Resources': {}})

        assert make_stack(client).load_template('app') == b'{"Resources": {}}'
