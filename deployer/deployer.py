"""
Deployer
Resolve -> submit -> confirm, one contract instance per call
"""

from typing import Optional
from web3 import Web3
from web3.exceptions import TimeExhausted
from loguru import logger

from blockchain.artifact_registry import ArtifactRegistry
from blockchain.transaction_builder import TransactionBuilder
from blockchain.wallet_manager import DeployerAccount
from utils.gas_calculator import GasCalculator
from utils.rpc_manager import RPCManager
from .config import DeploymentConfig
from .errors import ConfirmationTimeout, DeploymentError, RevertError, SubmissionError
from .result import DeploymentResult


class Deployer:
    """
    Deploys a single contract instance

    Every failure is caught here once and returned as a failed
    DeploymentResult; nothing in the resolve/submit/confirm chain retries.
    """

    def __init__(
        self,
        config: DeploymentConfig,
        registry: Optional[ArtifactRegistry] = None,
        rpc_manager: Optional[RPCManager] = None
    ):
        """
        Initialize Deployer

        Args:
            config: Deployment configuration
            registry: Artifact registry (default: from config.artifacts_dir)
            rpc_manager: Network connection (default: from config.network)
        """
        self.config = config
        self.registry = registry or ArtifactRegistry(config.artifacts_dir, config.project_root)
        self.rpc_manager = rpc_manager or RPCManager(config.network, config.rpc_request_timeout)

    async def deploy(self) -> DeploymentResult:
        """
        Deploy one instance of config.contract_name

        Returns:
            DeploymentResult (success with address, or tagged failure)
        """
        name = self.config.contract_name
        tx_hash = None

        logger.info(f"Starting {name} deployment on {self.config.network.name}...")

        try:
            factory = self.registry.resolve(name)

            w3 = self.rpc_manager.connect()
            account = DeployerAccount(w3, self.config.private_key)

            builder = TransactionBuilder(
                w3,
                GasCalculator(w3, self.config.gas),
                chain_id=self.config.network.chain_id,
                eip1559=self.config.network.eip1559
            )
            transaction = await builder.build_deployment_tx(
                factory, account, self.config.constructor_args
            )

            logger.info("Sending deployment transaction...")
            tx_hash = Web3.to_hex(account.send(transaction))
            logger.info(f"Transaction sent: {tx_hash}")

            receipt = await self._wait_for_confirmation(w3, tx_hash)

        except DeploymentError as e:
            logger.error(f"Deployment failed ({e.kind}): {e}")
            return DeploymentResult.failure(name, e, tx_hash=tx_hash)

        address = Web3.to_checksum_address(receipt['contractAddress'])

        logger.success(f"{name} deployed at {address}")
        logger.success(f"Gas used: {receipt.get('gasUsed')}")

        return DeploymentResult.success(
            name,
            address,
            tx_hash=tx_hash,
            block_number=receipt.get('blockNumber'),
            gas_used=receipt.get('gasUsed')
        )

    async def _wait_for_confirmation(self, w3: Web3, tx_hash: str):
        """
        Block until the creation receipt is available

        Raises:
            ConfirmationTimeout: no receipt within confirmation_timeout
            RevertError: receipt status is 0
            SubmissionError: RPC failure or receipt without contract address
        """
        logger.info("Waiting for confirmation...")

        try:
            receipt = w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=self.config.confirmation_timeout,
                poll_latency=self.config.poll_latency
            )
        except TimeExhausted as e:
            raise ConfirmationTimeout(
                f"Transaction {tx_hash} not confirmed after {self.config.confirmation_timeout}s"
            ) from e
        except Exception as e:
            raise SubmissionError(f"Failed waiting for receipt of {tx_hash}: {e}") from e

        if receipt['status'] != 1:
            raise RevertError(f"Deployment transaction {tx_hash} reverted")

        if not receipt.get('contractAddress'):
            raise SubmissionError(f"Receipt for {tx_hash} has no contract address")

        return receipt
