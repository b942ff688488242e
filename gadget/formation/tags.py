#!/usr/bin/env python3
"""
Tag applicator: stamps governance tags onto template resources.

Command-specific resources (the Lambda function and its execution role)
receive the command tag set. Everything else a command document declares
receives only the application tag set.
"""

from .document import shape_of
from ..errors import GadgetError, TagApplicationError, TypeMismatchError

COMMAND_SPECIFIC_RESOURCE_TYPES = (
    'AWS::Lambda::Function',
    'AWS::IAM::Role',
)


def allow_list_predicate(resource_types):
    allowed = frozenset(resource_types)
    return lambda resource_type: resource_type in allowed


def deny_list_predicate(resource_types):
    denied = frozenset(resource_types)
    return lambda resource_type: resource_type not in denied


def apply_tags(resource_id, resource, tags):
    """
    Insert tags into the resource's Tags property.

    Only resources that already declare a Tags container are touched. A list
    of {Key, Value} entries gets matching keys updated and new keys appended;
    a mapping gets keys merged in.
    """
    properties = resource.get('Properties')
    if properties is None:
        return
    if not isinstance(properties, dict):
        raise TypeMismatchError(f"Properties of resource {resource_id}", shape_of(properties))
    if 'Tags' not in properties:
        return

    dest_tags = properties['Tags']
    if isinstance(dest_tags, list):
        positions = {}
        for index, entry in enumerate(dest_tags):
            # intrinsic keys (!Sub, Fn::Sub) are left as they are
            if isinstance(entry, dict) and isinstance(entry.get('Key'), str):
                positions[entry['Key']] = index
        for key, value in tags.items():
            if key in positions:
                dest_tags[positions[key]]['Value'] = value
            else:
                positions[key] = len(dest_tags)
                dest_tags.append({'Key': key, 'Value': value})
    elif isinstance(dest_tags, dict):
        dest_tags.update(tags)
    else:
        raise TagApplicationError(resource_id, shape_of(dest_tags))


class TagApplicator:
    """Applies tag sets to resources selected by their Type."""

    def __init__(self, resource_types=COMMAND_SPECIFIC_RESOURCE_TYPES):
        self.resource_types = tuple(resource_types)
        self.command_predicate = allow_list_predicate(self.resource_types)
        self.shared_predicate = deny_list_predicate(self.resource_types)

    def apply(self, resources, predicate, tags, resource_ids=None):
        """
        Tag every resource whose Type satisfies predicate.

        resource_ids narrows the pass to the given logical ids. Returns a list
        of errors; one bad resource does not stop the others being tagged.
        """
        errors = []
        if resource_ids is None:
            resource_ids = list(resources)

        for resource_id in resource_ids:
            resource = resources.get(resource_id)
            if not isinstance(resource, dict):
                errors.append(TypeMismatchError(f"resource {resource_id}", shape_of(resource)))
                continue
            resource_type = resource.get('Type')
            if not isinstance(resource_type, str) or not predicate(resource_type):
                continue
            try:
                apply_tags(resource_id, resource, tags)
            except GadgetError as e:
                errors.append(e)
        return errors

    def apply_command(self, resources, command_tags, application_tags, resource_ids=None):
        """Run both tagging passes for one command and join their errors."""
        command_errors = self.apply(resources, self.command_predicate, command_tags, resource_ids)
        application_errors = self.apply(resources, self.shared_predicate, application_tags, resource_ids)
        return command_errors + application_errors
