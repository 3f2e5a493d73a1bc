"""
Deployment Errors
Single error taxonomy for resolve -> submit -> confirm
"""


class DeploymentError(Exception):
    """Base class for every failure the deployer reports"""

    kind = 'deployment'


class ConfigurationError(DeploymentError):
    """Invalid or missing configuration (network, key, settings)"""

    kind = 'configuration'


class ResolutionError(DeploymentError):
    """Contract artifact unknown, missing, unreadable or stale"""

    kind = 'resolution'


class SubmissionError(DeploymentError):
    """Network / RPC failure while connecting or sending"""

    kind = 'submission'


class RevertError(DeploymentError):
    """Contract initialization rejected the deployment"""

    kind = 'revert'


class ConfirmationTimeout(DeploymentError, TimeoutError):
    """Creation receipt did not arrive in time"""

    kind = 'timeout'
