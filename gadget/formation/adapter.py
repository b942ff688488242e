#!/usr/bin/env python3
"""
Application template composition.

Merges each command's generated template into the application template and
tags the resources that command contributed.
"""

from pathlib import Path

from .document import load_document, save_document
from .merge import MergeEngine
from .tags import TagApplicator
from .template import Template
from ..errors import CompositionError

TAG_SOURCE_MODULE = 'org.gadget.source.module'
TAG_APPLICATION_NAME = 'org.gadget.application.name'
TAG_COMMAND_ALIAS = 'org.gadget.source.command.alias'
TAG_COMMAND_SOURCE = 'org.gadget.source.command.source'


def build_application_tags(application_name, module_identity, user_tags=None):
    """User tags from gadget.yaml, overlaid with the provenance tags."""
    tags = dict(user_tags or {})
    tags[TAG_SOURCE_MODULE] = module_identity
    tags[TAG_APPLICATION_NAME] = application_name
    return tags


def build_command_tags(application_tags, command, source):
    tags = dict(application_tags)
    tags[TAG_COMMAND_ALIAS] = command
    tags[TAG_COMMAND_SOURCE] = source
    return tags


class GadgetFormation:
    """Owns the application Template for a single deploy run."""

    def __init__(self, application_name, module_identity, staging_dir, user_tags=None,
                 merge_engine=None, tag_applicator=None):
        self.application_name = application_name
        self.staging_dir = Path(staging_dir)
        self.tags = build_application_tags(application_name, module_identity, user_tags)
        self.template = Template()
        self.merge_engine = merge_engine or MergeEngine(self.template)
        self.tag_applicator = tag_applicator or TagApplicator()

    def merge_command_document(self, command, source, document):
        """
        Merge one parsed command document and tag its resources.

        Raises CompositionError carrying every merge and tag error.
        """
        errors = self.merge_engine.merge(document)
        command_tags = build_command_tags(self.tags, command, source)
        errors.extend(self.tag_applicator.apply_command(
            self.template.resources,
            command_tags,
            self.tags,
            resource_ids=self.merge_engine.last_merged_resources,
        ))
        if errors:
            raise CompositionError(errors, command=command)

    def merge_command_template(self, command, source, file_name):
        """Load a command's template file and merge it."""
        document = load_document(file_name)
        self.merge_command_document(command, source, document)

    def save_application_template(self, file_name):
        """Write the merged template into the staging area, return its path."""
        return save_document(self.staging_dir / file_name, self.template.to_document())
