"""
RPC Manager
Connects to the target network, falling back through its RPC endpoints in order
"""

from typing import Dict, List, Optional
from urllib.parse import urlsplit
from web3 import Web3
from loguru import logger

from deployer.config import NetworkProfile
from deployer.errors import ConfigurationError, SubmissionError


class RPCManager:
    """
    Tiered RPC connection for a single network profile

    Endpoints are tried in the order they are configured; the first one
    that answers becomes the connection for the whole deployment.
    """

    def __init__(self, network: NetworkProfile, request_timeout: float = 30):
        """
        Initialize RPC Manager

        Args:
            network: Network profile with ordered HTTP endpoints
            request_timeout: Per-request HTTP timeout in seconds
        """
        self.network = network
        self.request_timeout = request_timeout

        self.w3: Optional[Web3] = None
        self.active_url: Optional[str] = None

        # Last error per endpoint
        self.failures: Dict[str, str] = {}

        logger.info(f"RPC Manager initialized with {len(network.http_urls)} endpoint(s) for {network.name}")

    def connect(self) -> Web3:
        """
        Connect to the first reachable endpoint

        Returns:
            Connected Web3 instance

        Raises:
            SubmissionError: no endpoint reachable
            ConfigurationError: node reports a different chain id
        """
        if self.w3 is not None:
            return self.w3

        for tier, url in enumerate(self.network.http_urls, start=1):
            label = self._redact(url)

            try:
                w3 = Web3(Web3.HTTPProvider(
                    url,
                    request_kwargs={'timeout': self.request_timeout}
                ))

                if not w3.is_connected():
                    logger.warning(f"Tier {tier} ({label}) not reachable")
                    self.failures[url] = 'not connected'
                    continue

            except Exception as e:
                logger.warning(f"Tier {tier} ({label}) error: {e}")
                # provider messages can echo the full URL, keys included
                self.failures[url] = type(e).__name__
                continue

            self._check_chain_id(w3)

            self.w3 = w3
            self.active_url = url
            logger.success(f"Connected to {self.network.name} via tier {tier} ({label})")
            return w3

        logger.critical("All RPC tiers exhausted!")
        for status in self.get_endpoint_status():
            logger.error(f"  {status['url']}: {status['error']}")

        details = ', '.join(
            f"{status['url']} ({status['error']})" for status in self.get_endpoint_status()
        )
        raise SubmissionError(
            f"Failed to connect to network '{self.network.key}': "
            f"all {len(self.network.http_urls)} RPC endpoint(s) unreachable: {details}"
        )

    def _check_chain_id(self, w3: Web3):
        expected = self.network.chain_id
        if expected is None:
            return

        try:
            actual = w3.eth.chain_id
        except Exception as e:
            raise SubmissionError(f"Failed to read chain id: {e}") from e

        if actual != expected:
            raise ConfigurationError(
                f"Network '{self.network.key}' expects chain id {expected}, "
                f"but the node reports {actual}"
            )

    def get_endpoint_status(self) -> List[Dict]:
        """Status of every configured endpoint, API keys redacted"""
        return [
            {
                'url': self._redact(url),
                'active': url == self.active_url,
                'error': self.failures.get(url)
            }
            for url in self.network.http_urls
        ]

    @staticmethod
    def _redact(url: str) -> str:
        """Strip paths (which usually carry API keys) from an RPC URL"""
        parts = urlsplit(url)
        if not parts.netloc:
            return url
        return f"{parts.scheme}://{parts.netloc}"
