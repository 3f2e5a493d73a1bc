"""
VaultGate Deployer Package
Deploys a compiled contract instance and reports its address
"""

from .config import DeploymentConfig, GasSettings, NetworkProfile, load_config
from .errors import (
    ConfigurationError,
    ConfirmationTimeout,
    DeploymentError,
    ResolutionError,
    RevertError,
    SubmissionError
)
from .result import DeploymentResult, ErrorKind

__all__ = [
    'DeploymentConfig',
    'GasSettings',
    'NetworkProfile',
    'load_config',
    'DeploymentError',
    'ConfigurationError',
    'ResolutionError',
    'SubmissionError',
    'RevertError',
    'ConfirmationTimeout',
    'DeploymentResult',
    'ErrorKind'
]
