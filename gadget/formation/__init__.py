"""
Template composition package.

This package contains the application template model, the merge engine that
folds per-command templates into it, and the tag applicator.
"""

from .adapter import GadgetFormation
from .merge import MergeEngine
from .tags import TagApplicator
from .template import Template

__all__ = ['GadgetFormation', 'MergeEngine', 'TagApplicator', 'Template']
