#!/usr/bin/env python3
"""
Structured document I/O for CloudFormation templates.

Per-command templates are plain YAML trees (dict / list / scalar). Short-form
intrinsic functions such as !Ref or !GetAtt are kept as Tagged values so they
survive a load/merge/save round trip untouched.
"""

from pathlib import Path

import yaml
from yaml.nodes import MappingNode, ScalarNode, SequenceNode

from ..errors import TypeMismatchError


class Tagged:
    """A YAML node carrying a local tag, e.g. !Ref MyBucket."""

    def __init__(self, tag, value):
        self.tag = tag
        self.value = value

    def __eq__(self, other):
        return isinstance(other, Tagged) and (self.tag, self.value) == (other.tag, other.value)

    def __hash__(self):
        return hash((self.tag, repr(self.value)))

    def __repr__(self):
        return f"Tagged({self.tag!r}, {self.value!r})"


class CfnLoader(yaml.SafeLoader):
    pass


class CfnDumper(yaml.SafeDumper):

    def ignore_aliases(self, data):
        # CloudFormation does not accept YAML anchors
        return True


def _construct_tagged(loader, tag_suffix, node):
    tag = f"!{tag_suffix}"
    if isinstance(node, ScalarNode):
        value = loader.construct_scalar(node)
    elif isinstance(node, SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    elif isinstance(node, MappingNode):
        value = loader.construct_mapping(node, deep=True)
    else:
        value = loader.construct_object(node)
    return Tagged(tag, value)


def _represent_tagged(dumper, data):
    if isinstance(data.value, dict):
        return dumper.represent_mapping(data.tag, data.value)
    if isinstance(data.value, list):
        return dumper.represent_sequence(data.tag, data.value)
    return dumper.represent_scalar(data.tag, str(data.value))


CfnLoader.add_multi_constructor("!", _construct_tagged)
CfnDumper.add_representer(Tagged, _represent_tagged)


def shape_of(value):
    """Short human name for the shape of a document node."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'bool'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, list):
        return 'sequence'
    if isinstance(value, dict):
        return 'mapping'
    if isinstance(value, Tagged):
        return f"tagged {value.tag}"
    return type(value).__name__


def expect_mapping(value, location):
    """Return value if it is a mapping, raise TypeMismatchError otherwise."""
    if not isinstance(value, dict):
        raise TypeMismatchError(location, shape_of(value))
    return value


def normalize_key(key, location):
    """Section keys must be strings; YAML happily produces ints and bools."""
    if not isinstance(key, str):
        raise TypeMismatchError(f"key {key!r} in {location}", shape_of(key), expected='string')
    return key


def parse_document(text):
    return yaml.load(text, Loader=CfnLoader)


def load_document(file_path):
    """Load a YAML document from disk."""
    with open(file_path, 'r', encoding='utf-8') as f:
        return yaml.load(f, Loader=CfnLoader)


def dump_document(document):
    return yaml.dump(document, Dumper=CfnDumper, default_flow_style=False, sort_keys=False)


def save_document(file_path, document):
    """Write a YAML document, creating parent directories as needed."""
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        f.write(dump_document(document))
    return str(file_path)
