"""
Deployment Result
Success-or-failure value returned by the deployer
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import DeploymentError


class ErrorKind(str, Enum):
    """Tag for a failed deployment"""

    DEPLOYMENT = 'deployment'
    CONFIGURATION = 'configuration'
    RESOLUTION = 'resolution'
    SUBMISSION = 'submission'
    REVERT = 'revert'
    TIMEOUT = 'timeout'


@dataclass(frozen=True)
class DeploymentResult:
    """
    Outcome of one deployment

    On success `address` holds the confirmed instance address.
    On failure `error_kind` and `error` describe what went wrong.
    """

    contract_name: str
    address: Optional[str] = None
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None and self.address is not None

    @classmethod
    def success(
        cls,
        contract_name: str,
        address: str,
        tx_hash: Optional[str] = None,
        block_number: Optional[int] = None,
        gas_used: Optional[int] = None
    ) -> 'DeploymentResult':
        return cls(
            contract_name=contract_name,
            address=address,
            tx_hash=tx_hash,
            block_number=block_number,
            gas_used=gas_used
        )

    @classmethod
    def failure(
        cls,
        contract_name: str,
        error: DeploymentError,
        tx_hash: Optional[str] = None
    ) -> 'DeploymentResult':
        return cls(
            contract_name=contract_name,
            tx_hash=tx_hash,
            error_kind=ErrorKind(error.kind),
            error=str(error)
        )
