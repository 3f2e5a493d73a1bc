"""
Wallet Manager
Deployer account: a local private key or the node's first unlocked account
"""

from typing import Dict, Optional
from web3 import Web3
from web3.exceptions import ContractLogicError
from eth_account import Account
from loguru import logger

from deployer.errors import ConfigurationError, RevertError, SubmissionError


class DeployerAccount:
    """
    Account that pays for and signs the deployment

    With a private key, transactions are signed locally and sent raw.
    Without one, the node's first account signs (local Hardhat / Anvil nodes).
    """

    def __init__(self, w3: Web3, private_key: Optional[str] = None):
        """
        Initialize deployer account

        Args:
            w3: Connected Web3 instance
            private_key: Hex private key (None = use node account)
        """
        self.w3 = w3
        self.account = None

        if private_key:
            try:
                self.account = Account.from_key(private_key)
            except (ValueError, TypeError) as e:
                # never echo the key itself
                raise ConfigurationError("DEPLOYER_PRIVATE_KEY is not a valid private key") from e
            self.address = self.account.address
        else:
            self.address = self._node_account()

        logger.info(f"Deploying from: {self.address}")

    @property
    def is_local(self) -> bool:
        return self.account is not None

    def _node_account(self) -> str:
        try:
            accounts = self.w3.eth.accounts
        except Exception as e:
            raise SubmissionError(f"Failed to list node accounts: {e}") from e

        if not accounts:
            raise SubmissionError(
                "DEPLOYER_PRIVATE_KEY not set and the node exposes no unlocked accounts"
            )

        return Web3.to_checksum_address(accounts[0])

    def get_balance(self) -> int:
        """Native balance in wei"""
        try:
            return self.w3.eth.get_balance(self.address)
        except Exception as e:
            raise SubmissionError(f"Failed to read balance of {self.address}: {e}") from e

    def get_nonce(self) -> int:
        """Next nonce, pending transactions included"""
        try:
            return self.w3.eth.get_transaction_count(self.address, 'pending')
        except Exception as e:
            raise SubmissionError(f"Failed to read nonce of {self.address}: {e}") from e

    def send(self, transaction: Dict) -> bytes:
        """
        Sign (if local) and send a transaction

        Args:
            transaction: Fully built transaction dict

        Returns:
            Transaction hash

        Raises:
            RevertError: node rejected the call as a revert
            SubmissionError: any other send failure
        """
        try:
            if self.is_local:
                signed_tx = self.account.sign_transaction(transaction)
                return self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)

            return self.w3.eth.send_transaction(transaction)

        except ContractLogicError as e:
            raise RevertError(f"Deployment reverted: {e}") from e
        except Exception as e:
            raise SubmissionError(f"Failed to send deployment transaction: {e}") from e
