"""
Configuration package.

This package contains the application config (gadget.yaml), the bootstrap
config, tool settings and application config validation.
"""

__all__ = ['application', 'bootstrap', 'settings', 'validation']
