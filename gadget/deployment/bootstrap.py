#!/usr/bin/env python3
"""
Bootstrap: creates the stack holding the deployment bucket and records the
bucket name in .gadget/bootstrap.yaml.
"""

from .stack import CloudFormationStack
from .utils import debug, print_phase
from ..config.bootstrap import Bootstrap, save_bootstrap
from ..errors import GadgetError, StackFailedError
from ..formation.document import Tagged, dump_document
from ..formation.template import Template

DEPLOY_BUCKET = 'DeployBucket'


def create_bootstrap_template():
    """Template with one S3 bucket whose name is exported as an output."""
    template = Template(description='gadget deployment bucket')
    template.add_resource(DEPLOY_BUCKET, 'AWS::S3::Bucket')
    template.add_output(DEPLOY_BUCKET, Tagged('!Ref', DEPLOY_BUCKET))
    return dump_document(template.to_document()).encode('utf-8')


def generate_bootstrap(outputs, stack_name):
    bucket = outputs.get(DEPLOY_BUCKET)
    if not isinstance(bucket, str) or not bucket:
        raise GadgetError(f"stack {stack_name} does not have a {DEPLOY_BUCKET} output")
    return Bootstrap(bucket)


def bootstrap_command(workspace, settings, stack=None):
    """Create (or reuse) the bootstrap stack and save the bucket name."""
    stack_name = settings['bootstrap_stack_name']
    stack = stack or CloudFormationStack(settings)
    print_phase(f"BOOTSTRAP ({stack_name})")

    status = stack.get_deployment_status(stack_name)
    debug(f"Deployment status: found={status.found} status={status.status}")
    if not status.found:
        stack.deploy_template_as_bytes(stack_name, create_bootstrap_template())
    elif not status.successful:
        raise StackFailedError(stack_name, status.status, 'bootstrap')
    else:
        print(f"Stack {stack_name} already exists, reusing it")

    bootstrap = generate_bootstrap(stack.get_outputs(stack_name), stack_name)
    path = save_bootstrap(bootstrap, workspace.bootstrap_path)
    print(f"[OK] Deployment bucket: {bootstrap.s3_bucket_name}")
    print(f"Saved bootstrap config: {path}")
    return bootstrap
