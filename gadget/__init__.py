"""
gadget - package Go commands as Lambda functions and deploy them as one
CloudFormation stack.

Sub-packages:
    config     - application, bootstrap and tool settings
    formation  - template model, merge engine and tag applicator
    deployment - stack driver, orchestrator and CLI
    staging    - build/package collaborator (Go toolchain, zip, checksum)
    storage    - artifact upload backends (S3, local)
"""

__version__ = '0.3.0'

__all__ = ['config', 'formation', 'deployment', 'staging', 'storage', 'errors']
