#!/usr/bin/env python3
"""
Merge engine: folds per-command template documents into one Template.

Each mergeable section has a policy that decides what happens when an
incoming key already exists in the accumulated section:

    Parameters, Mappings, Conditions -> overwrite_existing (newer value wins)
    Resources                        -> conflict (logical ids must be unique)

Description and Transform must not appear in a per-command document at all.

merge() never stops at the first problem. It walks every section and returns
the full list of errors so a caller sees every violation in one document.
"""

from .document import expect_mapping, normalize_key
from .template import MERGEABLE_SECTIONS
from ..errors import GadgetError, MergeConflictError, TypeMismatchError


def overwrite_existing(section, key, incoming, existing):
    return incoming


def keep_existing(section, key, incoming, existing):
    return existing


def conflict(section, key, incoming, existing):
    raise MergeConflictError(section, key)


DEFAULT_SECTION_POLICIES = {
    'Parameters': overwrite_existing,
    'Mappings': overwrite_existing,
    'Conditions': overwrite_existing,
    'Resources': conflict,
}

DEFAULT_FORBIDDEN_KEYS = ('Transform', 'Description')


def merge_section(section, source, target, policy):
    """
    Merge one section mapping into target. Returns a list of errors.

    Keys that fail (non-string key or policy conflict) leave the target
    untouched for that key; remaining keys are still merged. merged_keys only
    lists keys whose value now comes from source.
    """
    errors = []
    merged_keys = []
    for raw_key, incoming in source.items():
        try:
            key = normalize_key(raw_key, section)
            if key in target:
                value = policy(section, key, incoming, target[key])
                target[key] = value
                if value is not incoming:
                    continue
            else:
                target[key] = incoming
            merged_keys.append(key)
        except GadgetError as e:
            errors.append(e)
    return merged_keys, errors


class MergeEngine:
    """Merges documents into a single Template instance."""

    def __init__(self, template, section_policies=None, forbidden_keys=None):
        self.template = template
        if section_policies is None:
            section_policies = DEFAULT_SECTION_POLICIES
        if forbidden_keys is None:
            forbidden_keys = DEFAULT_FORBIDDEN_KEYS
        self.section_policies = dict(section_policies)
        self.forbidden_keys = tuple(forbidden_keys)
        self.last_merged_resources = []

        for section in self.section_policies:
            if section not in MERGEABLE_SECTIONS:
                raise ValueError(f"section {section} cannot be merged")

    def merge(self, document):
        """
        Merge a parsed document into the template.

        Returns a list of errors (empty on success). The ids of the resources
        this document added are left in last_merged_resources.
        """
        self.last_merged_resources = []
        try:
            expect_mapping(document, 'document')
        except TypeMismatchError as e:
            return [e]

        errors = []
        for key in self.forbidden_keys:
            if key in document:
                errors.append(MergeConflictError(
                    'template', key,
                    f"cannot merge a template containing a {key} statement"
                ))

        for section, policy in self.section_policies.items():
            if section not in document:
                continue
            try:
                source = expect_mapping(document[section], section)
            except TypeMismatchError as e:
                errors.append(e)
                continue
            merged_keys, section_errors = merge_section(
                section, source, self.template.section(section), policy
            )
            errors.extend(section_errors)
            if section == 'Resources':
                self.last_merged_resources = merged_keys

        return errors
