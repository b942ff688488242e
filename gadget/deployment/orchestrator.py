#!/usr/bin/env python3
"""
gadget Deployment Orchestrator
Builds every command, merges their templates and deploys one stack.
"""

import argparse
import sys

from botocore.exceptions import BotoCoreError, ClientError

from .bootstrap import bootstrap_command
from .stack import CloudFormationStack
from .utils import debug, error, print_phase, set_verbose
from .work import init_command, set_tag_command, use_command
from ..config.application import load_application_config
from ..config.bootstrap import load_bootstrap
from ..config.settings import Workspace, load_settings
from ..config.validation import validate_application_config
from ..errors import CommandDeploymentError, ConfigError, GadgetError
from ..formation.adapter import GadgetFormation
from ..staging import GoStaging, read_module_identity
from ..storage import get_storage_backend


def artifact_key(command_name):
    return f"{command_name}/bootstrap.zip"


def prepare_command_deployment(command, source, bucket, staging, storage, settings):
    """
    Build, package and upload one command.
    Returns the path of the command's generated CloudFormation template.
    """
    local_binary = f"{command}_local"
    debug(f"Compiling command {command}")
    staging.compile(source, local_binary)

    debug(f"Cross compiling command {command} ({settings['target_os']}/{settings['target_arch']})")
    remote_binary = staging.cross_compile(source, command, settings['target_os'], settings['target_arch'])

    zip_name = f"{command}.zip"
    debug(f"Zipping command into {zip_name}")
    zip_file = staging.zip(remote_binary, zip_name)

    checksum = staging.checksum(command)
    debug(f"Checksum: {checksum}")

    key = artifact_key(command)
    storage.create_file(checksum, bucket, f"{key}.sha256")
    url = storage.upload_file(zip_file, bucket, key)
    debug(f"Uploaded to {url}")

    template_name = f"{command}_cf.yaml"
    debug(f"Generating command template {template_name}")
    return staging.generate_template(staging.get_file(local_binary), template_name, command, bucket, key)


def storage_settings(workspace, settings):
    """Settings with the local bucket directory anchored at the workspace root."""
    local_dir = workspace.root / settings.get('local_storage_dir', '.gadget/buckets')
    return dict(settings, local_storage_dir=str(local_dir))


def validate_config_before_action(workspace):
    """Helper to run validation and raise on failure."""
    is_valid, errors = validate_application_config(workspace.application_config_path, workspace.root)
    if not is_valid:
        raise ConfigError("Application config validation failed:\n" + "\n".join(f"  - {e}" for e in errors))
    print("[OK] Application config validation successful")


def deploy_command(workspace, settings, staging=None, storage=None, stack=None, module_identity=None):
    """Build and merge every command, then create or update the stack."""
    validate_config_before_action(workspace)
    application = load_application_config(workspace.application_config_path)
    bootstrap = load_bootstrap(workspace.bootstrap_path)

    staging = staging or GoStaging(workspace.ensure_staging())
    storage = storage or get_storage_backend(storage_settings(workspace, settings))
    stack = stack or CloudFormationStack(settings)
    if module_identity is None:
        module_identity = read_module_identity(workspace.go_mod_path)

    formation = GadgetFormation(application.name, module_identity, workspace.staging_path, application.tags)

    print_phase(f"DEPLOYING APPLICATION: {application.name}")
    print(f"Bucket: {bootstrap.s3_bucket_name}, Commands: {len(application.commands)}\n")

    for command in application.commands:
        print(f"Deploying command: {command.name}")
        try:
            template_file = prepare_command_deployment(
                command.name, str(workspace.root / command.path),
                bootstrap.s3_bucket_name, staging, storage, settings
            )
            debug(f"Merging command template {template_file}")
            formation.merge_command_template(command.name, command.path, template_file)
        except Exception as e:
            raise CommandDeploymentError(command.name, e) from e
        print(f"[OK] {command.name}")

    template_file = formation.save_application_template(settings['template_name'])
    print(f"Saved application template: {template_file}")

    status = stack.get_deployment_status(application.name)
    debug(f"Deployment status: found={status.found} successful={status.successful} status={status.status}")
    if status.found:
        result = stack.update_template_as_file(application.name, template_file)
    else:
        result = stack.deploy_template_as_file(application.name, template_file)

    print("=" * 60)
    print(f"DEPLOYMENT OF {application.name} COMPLETE")
    print("=" * 60)
    return result


def status_command(workspace, settings, stack=None):
    application = load_application_config(workspace.application_config_path)
    stack = stack or CloudFormationStack(settings)
    status = stack.get_deployment_status(application.name)
    print(f"Stack: {application.name}")
    print(f"  Found: {status.found}")
    print(f"  Status: {status.status}")
    return status


def validate_command(workspace):
    """Validate gadget.yaml and report every problem."""
    print_phase("VALIDATING APPLICATION CONFIG")
    print(f"File: {workspace.application_config_path}")
    is_valid, errors = validate_application_config(workspace.application_config_path, workspace.root)
    if is_valid:
        print("  [OK] Valid")
    else:
        print("  [FAILED] Invalid")
        for e in errors:
            print(f"    - {e}")
    return is_valid


def build_parser():
    parser = argparse.ArgumentParser(
        prog='gadget',
        description='Deploy Go commands as Lambda functions in one CloudFormation stack',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Set up a workspace
  gadget work init my-app
  gadget work use cmd/hello/hello.go
  gadget work set-tag --key team --value platform

  # Create the deployment bucket once per account/region
  gadget bootstrap

  # Build, merge and deploy every command
  gadget deploy
        """
    )
    parser.add_argument('--dir', default='.', help='Workspace directory (default: current directory)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Print every build step')

    subparsers = parser.add_subparsers(dest='command', required=True)

    work = subparsers.add_parser('work', help='Manage your gadget workspace')
    work_sub = work.add_subparsers(dest='work_command', required=True)
    init = work_sub.add_parser('init', help='Initialize your app')
    init.add_argument('name', help='Application name (also the stack name)')
    use = work_sub.add_parser('use', help='Use a command in your app')
    use.add_argument('path', help='Path of the command source')
    set_tag = work_sub.add_parser('set-tag', help='Add a tag to your app')
    set_tag.add_argument('--key', required=True, help='Key of the tag')
    set_tag.add_argument('--value', required=True, help='Value of the tag')

    subparsers.add_parser('bootstrap', help='Create the deployment bucket stack')
    subparsers.add_parser('deploy', help='Deploy the workspace to AWS')
    subparsers.add_parser('status', help='Show the stack status')
    subparsers.add_parser('validate', help='Validate gadget.yaml')
    return parser


def main(argv=None):
    """Main entry point - parse command line and run the requested command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    workspace = Workspace(args.dir)

    try:
        settings = load_settings(workspace)
        set_verbose(args.verbose or settings.get('verbose'))

        if args.command == 'work':
            if args.work_command == 'init':
                init_command(workspace, args.name)
            elif args.work_command == 'use':
                use_command(workspace, args.path)
            elif args.work_command == 'set-tag':
                set_tag_command(workspace, args.key, args.value)
        elif args.command == 'bootstrap':
            bootstrap_command(workspace, settings)
        elif args.command == 'deploy':
            deploy_command(workspace, settings)
        elif args.command == 'status':
            status_command(workspace, settings)
        elif args.command == 'validate':
            if not validate_command(workspace):
                sys.exit(1)
    except (GadgetError, ClientError, BotoCoreError, OSError, RuntimeError) as e:
        error(str(e))
        sys.exit(1)


if __name__ == '__main__':
    main()
