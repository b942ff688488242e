"""
Staging package: builds and packages commands before upload.
"""

from .go import GoStaging, read_module_identity

__all__ = ['GoStaging', 'read_module_identity']
