#!/usr/bin/env python3
"""
Error types for template composition and stack deployment.
"""


class GadgetError(Exception):
    """Base class for all gadget errors."""


class ConfigError(GadgetError):
    """Workspace configuration is missing or invalid."""


class MergeConflictError(GadgetError):
    """A document declares a key the accumulated template cannot accept."""

    def __init__(self, section, key, message=None):
        self.section = section
        self.key = key
        if message is None:
            message = f"key '{key}' already exists in {section}"
        super().__init__(message)


class TypeMismatchError(GadgetError):
    """A section or property does not have the expected shape."""

    def __init__(self, location, actual, expected='mapping'):
        self.location = location
        self.actual = actual
        self.expected = expected
        super().__init__(f"could not process {location}: expected {expected}, got {actual}")


class TagApplicationError(GadgetError):
    """A resource's Tags property is neither a list nor a mapping."""

    def __init__(self, resource_id, actual):
        self.resource_id = resource_id
        self.actual = actual
        super().__init__(f"could not tag resource {resource_id}: unsupported Tags type {actual}")


class CompositionError(GadgetError):
    """Every error raised while merging or tagging one command document."""

    def __init__(self, errors, command=None):
        self.errors = list(errors)
        self.command = command
        header = f"{len(self.errors)} error(s) composing template"
        if command:
            header += f" for command '{command}'"
        lines = [header] + [f"  - {error}" for error in self.errors]
        super().__init__("\n".join(lines))


class StackNotFoundError(GadgetError):
    """The stack vanished while its status was being polled."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"stack {name} not found")


class StackFailedError(GadgetError):
    """The stack reached a terminal status that is not a success."""

    def __init__(self, name, status, operation='deployment'):
        self.name = name
        self.status = status
        self.operation = operation
        super().__init__(f"{operation} of stack {name} failed with status {status}")


class StackTimeoutError(GadgetError):
    """The stack was still in progress when the poll timeout ran out."""

    def __init__(self, name, status, timeout):
        self.name = name
        self.status = status
        self.timeout = timeout
        super().__init__(f"stack {name} still {status} after {timeout}s")


class CommandDeploymentError(GadgetError):
    """Wraps the first failure while preparing or merging one command."""

    def __init__(self, command, cause):
        self.command = command
        self.cause = cause
        super().__init__(f"command '{command}': {cause}")
