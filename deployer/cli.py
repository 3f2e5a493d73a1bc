"""
Deployment Entry Point
Deploys the configured contract and prints its address
"""

import os
import sys
import asyncio
from typing import Optional
from loguru import logger

from .config import load_config
from .deployer import Deployer
from .errors import ConfigurationError


def configure_logging(level: str = 'INFO', log_file: Optional[str] = None):
    """
    Route loguru to stderr (stdout is reserved for the address line)

    Args:
        level: Console log level
        log_file: Optional rotating log file
    """
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=level
    )

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
            level="DEBUG"
        )


def main() -> int:
    """
    Deploy and report

    Returns:
        Process exit code: 0 on success, 1 on any error
    """
    configure_logging(
        level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        log_file=os.getenv('DEPLOY_LOG_FILE')
    )

    try:
        config = load_config()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        print(e, file=sys.stderr)
        return 1

    result = asyncio.run(Deployer(config).deploy())

    if not result.ok:
        print(result.error, file=sys.stderr)
        return 1

    print(f"{result.contract_name} contract deployed to: {result.address}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
