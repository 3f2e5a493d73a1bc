"""
Blockchain Interaction Package
Handles artifact resolution, deployment transaction building, and the deployer account
"""

from .artifact_registry import ArtifactRegistry, ContractFactory
from .transaction_builder import TransactionBuilder
from .wallet_manager import DeployerAccount

__all__ = ['ArtifactRegistry', 'ContractFactory', 'TransactionBuilder', 'DeployerAccount']
