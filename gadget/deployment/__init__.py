"""
Deployment and orchestration package.

This package contains the CloudFormation stack driver, the bootstrap and
workspace commands, and the orchestrator that deploys an application.
"""

__all__ = ['orchestrator', 'bootstrap', 'stack', 'work', 'utils']
