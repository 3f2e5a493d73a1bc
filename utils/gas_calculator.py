"""
Gas Calculator
Gas limit estimation and fee parameters for contract creation
"""

from typing import Dict
from web3 import Web3
from web3.exceptions import ContractLogicError
from loguru import logger

from deployer.config import GasSettings
from deployer.errors import RevertError, SubmissionError


class GasCalculator:
    """
    Estimates deployment gas and prices it

    Legacy networks get a single gasPrice, EIP-1559 networks get
    maxFeePerGas / maxPriorityFeePerGas. Both are capped by max_gas_price_gwei.
    """

    def __init__(self, w3: Web3, settings: GasSettings):
        """
        Initialize Gas Calculator

        Args:
            w3: Web3 instance
            settings: Gas settings from the deployment config
        """
        self.w3 = w3
        self.settings = settings

        self.max_gas_price_wei = Web3.to_wei(settings.max_gas_price_gwei, 'gwei')
        self.priority_fee_wei = Web3.to_wei(settings.priority_fee_gwei, 'gwei')

    async def estimate_deployment_gas(self, constructor, sender: str) -> int:
        """
        Estimate gas for a constructor call, with buffer

        Args:
            constructor: web3 ContractConstructor
            sender: Deployer address

        Returns:
            Gas limit

        Raises:
            RevertError: constructor reverts during estimation
        """
        try:
            gas_estimate = constructor.estimate_gas({'from': sender})
        except ContractLogicError as e:
            raise RevertError(f"Contract constructor reverted during gas estimation: {e}") from e
        except Exception as e:
            logger.warning(f"Gas estimation failed: {e}, using default")
            return self.settings.default_gas_limit

        gas_limit = self.apply_buffer(gas_estimate)
        logger.info(f"Gas limit: {gas_limit} (estimate {gas_estimate})")
        return gas_limit

    def apply_buffer(self, gas_estimate: int) -> int:
        return int(gas_estimate * self.settings.gas_limit_buffer)

    async def get_fee_params(self, eip1559: bool) -> Dict[str, int]:
        """
        Get fee fields for the deployment transaction

        Args:
            eip1559: Use maxFeePerGas / maxPriorityFeePerGas

        Returns:
            Dict with fee fields in wei
        """
        try:
            if eip1559:
                latest_block = self.w3.eth.get_block('latest')
                base_fee_wei = latest_block.get('baseFeePerGas', 0)
                return self.eip1559_fees(base_fee_wei)

            gas_price_wei = self.w3.eth.gas_price
        except Exception as e:
            raise SubmissionError(f"Failed to fetch gas price: {e}") from e

        fees = {'gasPrice': min(gas_price_wei, self.max_gas_price_wei)}
        logger.info(f"Gas price: {Web3.from_wei(fees['gasPrice'], 'gwei')} gwei")
        return fees

    def eip1559_fees(self, base_fee_wei: int) -> Dict[str, int]:
        """maxFee = base fee * 2 + tip, both capped"""
        priority_fee_wei = min(self.priority_fee_wei, self.max_gas_price_wei)
        max_fee_wei = min((base_fee_wei * 2) + priority_fee_wei, self.max_gas_price_wei)

        logger.info(
            f"Max fee: {Web3.from_wei(max_fee_wei, 'gwei')} gwei, "
            f"priority fee: {Web3.from_wei(priority_fee_wei, 'gwei')} gwei"
        )

        return {
            'maxFeePerGas': int(max_fee_wei),
            'maxPriorityFeePerGas': int(priority_fee_wei)
        }

    @staticmethod
    def max_cost(tx: Dict) -> int:
        """Worst-case cost of a transaction in wei (value excluded)"""
        price = tx.get('maxFeePerGas', tx.get('gasPrice', 0))
        return tx['gas'] * price
