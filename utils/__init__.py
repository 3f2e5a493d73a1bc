"""
Utilities Package
Gas pricing and RPC connection management
"""

from .gas_calculator import GasCalculator
from .rpc_manager import RPCManager

__all__ = [
    'GasCalculator',
    'RPCManager'
]
