"""
Deployment Configuration
Loads network profiles and deploy settings from .env and config/deploy_config.json
"""

import os
import json
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple
from loguru import logger
from dotenv import load_dotenv

from .errors import ConfigurationError


DEFAULT_CONFIG_PATH = 'config/deploy_config.json'

# Used when no config file is present: a local Hardhat node
DEFAULT_SETTINGS = {
    'contract_name': 'VaultGateProtocol',
    'artifacts_dir': 'artifacts',
    'default_network': 'localhost',
    'networks': {
        'localhost': {
            'name': 'Hardhat Local',
            'http_urls': ['http://127.0.0.1:8545'],
            'chain_id': 31337,
            'eip1559': False
        }
    },
    'gas_settings': {
        'gas_limit_buffer': 1.2,
        'default_gas_limit': 3000000,
        'max_gas_price_gwei': 500,
        'priority_fee_gwei': 2
    },
    'confirmation': {
        'timeout_seconds': 300,
        'poll_latency_seconds': 0.5
    },
    'rpc_request_timeout_seconds': 30
}


@dataclass(frozen=True)
class NetworkProfile:
    """Where to deploy"""

    key: str
    name: str
    http_urls: Tuple[str, ...]
    chain_id: Optional[int] = None
    eip1559: bool = False


@dataclass(frozen=True)
class GasSettings:
    gas_limit_buffer: float = 1.2
    default_gas_limit: int = 3000000
    max_gas_price_gwei: float = 500
    priority_fee_gwei: float = 2


@dataclass(frozen=True)
class DeploymentConfig:
    """
    Everything a deployment needs, resolved up front

    Built by `load_config()` at the call site and passed into the deployer,
    so nothing below this point reads the environment.
    """

    network: NetworkProfile
    contract_name: str = 'VaultGateProtocol'
    private_key: Optional[str] = field(default=None, repr=False)
    constructor_args: Tuple = ()
    artifacts_dir: str = 'artifacts'
    project_root: str = '.'
    gas: GasSettings = field(default_factory=GasSettings)
    confirmation_timeout: float = 300
    poll_latency: float = 0.5
    rpc_request_timeout: float = 30


def load_config(
    config_path: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None
) -> DeploymentConfig:
    """
    Build a DeploymentConfig

    Args:
        config_path: JSON settings file (default: $DEPLOY_CONFIG or
            config/deploy_config.json, built-in defaults if it does not exist)
        env: Environment mapping (default: os.environ after loading .env)

    Returns:
        DeploymentConfig

    Raises:
        ConfigurationError: on any invalid setting
    """
    if env is None:
        load_dotenv()
        env = os.environ

    path = config_path or env.get('DEPLOY_CONFIG') or DEFAULT_CONFIG_PATH
    settings = _read_settings(path, explicit=bool(config_path or env.get('DEPLOY_CONFIG')))

    network_key = env.get('DEPLOY_NETWORK') or settings.get('default_network', 'localhost')
    network = _build_network(network_key, settings.get('networks', {}), env)

    gas = _build_gas_settings(settings.get('gas_settings', {}))

    confirmation = settings.get('confirmation', {})
    timeout = _positive_number(
        confirmation.get('timeout_seconds', 300), 'confirmation.timeout_seconds'
    )
    poll_latency = _positive_number(
        confirmation.get('poll_latency_seconds', 0.5), 'confirmation.poll_latency_seconds'
    )
    rpc_timeout = _positive_number(
        settings.get('rpc_request_timeout_seconds', 30), 'rpc_request_timeout_seconds'
    )

    config_dir = os.path.dirname(os.path.abspath(path))
    project_root = settings.get('project_root')
    if project_root is None:
        # config/ lives one level below the project root
        project_root = os.path.dirname(config_dir) if os.path.exists(path) else os.getcwd()

    artifacts_dir = settings.get('artifacts_dir', 'artifacts')
    if not os.path.isabs(artifacts_dir):
        artifacts_dir = os.path.join(project_root, artifacts_dir)

    config = DeploymentConfig(
        network=network,
        contract_name=settings.get('contract_name', 'VaultGateProtocol'),
        private_key=env.get('DEPLOYER_PRIVATE_KEY') or None,
        constructor_args=_parse_constructor_args(env.get('DEPLOY_CONSTRUCTOR_ARGS')),
        artifacts_dir=artifacts_dir,
        project_root=project_root,
        gas=gas,
        confirmation_timeout=timeout,
        poll_latency=poll_latency,
        rpc_request_timeout=rpc_timeout
    )

    logger.debug(
        f"Config loaded: contract={config.contract_name} network={network.key} "
        f"urls={len(network.http_urls)}"
    )
    return config


def _read_settings(path: str, explicit: bool) -> Dict:
    """Read the JSON settings file, falling back to defaults"""
    if not os.path.exists(path):
        if explicit:
            raise ConfigurationError(f"Config file not found: {path}")
        logger.debug(f"{path} not found, using built-in defaults")
        return DEFAULT_SETTINGS

    try:
        with open(path, 'r') as f:
            settings = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(settings, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")

    return settings


def _build_network(key: str, networks: Dict, env: Mapping[str, str]) -> NetworkProfile:
    if key not in networks:
        available = ', '.join(sorted(networks)) or 'none'
        raise ConfigurationError(f"Unknown network '{key}' (available: {available})")

    network_config = networks[key]

    urls: List[str] = list(network_config.get('http_urls', []))
    for var in network_config.get('http_url_envs', []):
        url = env.get(var)
        if url:
            urls.append(url)
        else:
            logger.debug(f"{var} not set, skipping")

    if not urls:
        env_names = ', '.join(network_config.get('http_url_envs', []))
        raise ConfigurationError(
            f"No RPC URL configured for network '{key}'"
            + (f" (set one of: {env_names})" if env_names else '')
        )

    chain_id = network_config.get('chain_id')
    if chain_id is not None and not isinstance(chain_id, int):
        raise ConfigurationError(f"networks.{key}.chain_id must be an integer")

    return NetworkProfile(
        key=key,
        name=network_config.get('name', key),
        http_urls=tuple(urls),
        chain_id=chain_id,
        eip1559=bool(network_config.get('eip1559', False))
    )


def _build_gas_settings(gas_config: Dict) -> GasSettings:
    buffer = _positive_number(gas_config.get('gas_limit_buffer', 1.2), 'gas_limit_buffer')
    if buffer < 1:
        raise ConfigurationError(f"gas_limit_buffer must be >= 1, got {buffer}")

    return GasSettings(
        gas_limit_buffer=buffer,
        default_gas_limit=int(_positive_number(
            gas_config.get('default_gas_limit', 3000000), 'default_gas_limit'
        )),
        max_gas_price_gwei=_positive_number(
            gas_config.get('max_gas_price_gwei', 500), 'max_gas_price_gwei'
        ),
        priority_fee_gwei=_positive_number(
            gas_config.get('priority_fee_gwei', 2), 'priority_fee_gwei'
        )
    )


def _parse_constructor_args(raw: Optional[str]) -> Tuple:
    if not raw:
        return ()

    try:
        args = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"DEPLOY_CONSTRUCTOR_ARGS is not valid JSON: {e}") from e

    if not isinstance(args, list):
        raise ConfigurationError("DEPLOY_CONSTRUCTOR_ARGS must be a JSON list")

    return tuple(args)


def _positive_number(value, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive number, got {value!r}")
    return value
