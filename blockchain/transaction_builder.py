"""
Transaction Builder
Constructs the contract creation transaction
"""

from typing import Dict, Optional, Sequence
from web3 import Web3
from loguru import logger

from deployer.errors import ConfigurationError, ResolutionError, SubmissionError
from utils.gas_calculator import GasCalculator
from .artifact_registry import ContractFactory
from .wallet_manager import DeployerAccount


class TransactionBuilder:
    """
    Builds contract creation transactions
    """

    def __init__(
        self,
        w3: Web3,
        gas_calculator: GasCalculator,
        chain_id: Optional[int] = None,
        eip1559: bool = False
    ):
        """
        Initialize Transaction Builder

        Args:
            w3: Web3 instance
            gas_calculator: Gas limit / fee source
            chain_id: Chain id to sign for (None = ask the node)
            eip1559: Use type-2 fee fields
        """
        self.w3 = w3
        self.gas_calculator = gas_calculator
        self.chain_id = chain_id
        self.eip1559 = eip1559

    async def build_deployment_tx(
        self,
        factory: ContractFactory,
        account: DeployerAccount,
        constructor_args: Sequence = ()
    ) -> Dict:
        """
        Build transaction for contract creation

        Args:
            factory: Resolved contract blueprint
            account: Deployer account
            constructor_args: Positional constructor arguments

        Returns:
            Transaction dict

        Raises:
            ResolutionError: ABI / bytecode rejected by web3
            ConfigurationError: constructor arguments do not match the ABI
            RevertError: constructor reverts during estimation
            SubmissionError: RPC failure or insufficient funds
        """
        logger.info("Building deployment transaction...")

        try:
            Contract = self.w3.eth.contract(abi=factory.abi, bytecode=factory.bytecode)
        except (TypeError, ValueError) as e:
            raise ResolutionError(f"Artifact for '{factory.name}' is not deployable: {e}") from e

        try:
            constructor = Contract.constructor(*constructor_args)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Constructor arguments {list(constructor_args)} do not match {factory.name}: {e}"
            ) from e

        gas_limit = await self.gas_calculator.estimate_deployment_gas(constructor, account.address)
        fees = await self.gas_calculator.get_fee_params(self.eip1559)

        params = {
            'from': account.address,
            'nonce': account.get_nonce(),
            'gas': gas_limit,
            'chainId': self._get_chain_id(),
            **fees
        }

        try:
            transaction = constructor.build_transaction(params)
        except Exception as e:
            raise SubmissionError(f"Failed to build deployment transaction: {e}") from e

        self._check_balance(account, transaction)

        return transaction

    def _get_chain_id(self) -> int:
        if self.chain_id is not None:
            return self.chain_id

        try:
            return self.w3.eth.chain_id
        except Exception as e:
            raise SubmissionError(f"Failed to read chain id: {e}") from e

    def _check_balance(self, account: DeployerAccount, transaction: Dict):
        balance = account.get_balance()
        cost = GasCalculator.max_cost(transaction)

        logger.info(f"Account balance: {Web3.from_wei(balance, 'ether')} ETH")
        logger.info(f"Estimated max deployment cost: {Web3.from_wei(cost, 'ether')} ETH")

        if balance < cost:
            raise SubmissionError(
                f"Insufficient balance for deployment: have {balance} wei, need up to {cost} wei"
            )
