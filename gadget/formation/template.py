#!/usr/bin/env python3
"""
In-memory CloudFormation template for a whole application.
"""

FORMAT_VERSION = '2010-09-09'

MERGEABLE_SECTIONS = ('Parameters', 'Mappings', 'Conditions', 'Resources')


class Template:
    """
    Accumulating application template.

    Description and Metadata are only set on creation. The mapping sections
    are mutated in place by a single MergeEngine during one deploy run.
    """

    def __init__(self, description=None, metadata=None):
        self.format_version = FORMAT_VERSION
        self.description = description
        self.metadata = metadata
        self.parameters = {}
        self.mappings = {}
        self.conditions = {}
        self.resources = {}
        self.outputs = {}

    def section(self, name):
        """Return the dict backing a top-level section by its document name."""
        sections = {
            'Parameters': self.parameters,
            'Mappings': self.mappings,
            'Conditions': self.conditions,
            'Resources': self.resources,
            'Outputs': self.outputs,
        }
        if name not in sections:
            raise KeyError(f"unknown template section: {name}")
        return sections[name]

    def add_resource(self, logical_id, resource_type, properties=None):
        resource = {'Type': resource_type}
        if properties is not None:
            resource['Properties'] = properties
        self.resources[logical_id] = resource
        return resource

    def add_output(self, name, value, export_name=None):
        output = {'Value': value}
        if export_name:
            output['Export'] = {'Name': export_name}
        self.outputs[name] = output
        return output

    def to_document(self):
        """Render as a CloudFormation document (plain dicts, ordered)."""
        document = {'AWSTemplateFormatVersion': self.format_version}
        if self.description:
            document['Description'] = self.description
        if self.metadata:
            document['Metadata'] = self.metadata
        document['Parameters'] = self.parameters
        document['Mappings'] = self.mappings
        document['Conditions'] = self.conditions
        document['Resources'] = self.resources
        document['Outputs'] = self.outputs
        return document
