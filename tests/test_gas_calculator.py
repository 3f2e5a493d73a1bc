"""
Unit Tests for Gas Calculator
"""

import pytest
from unittest.mock import MagicMock
from web3 import Web3
from web3.exceptions import ContractLogicError

from deployer.config import GasSettings
from deployer.errors import RevertError, SubmissionError
from utils.gas_calculator import GasCalculator


NODE_ACCOUNT = '0x' + '11' * 20


@pytest.fixture
def w3():
    w3 = MagicMock()
    w3.eth.gas_price = Web3.to_wei(40, 'gwei')
    w3.eth.get_block.return_value = {'baseFeePerGas': Web3.to_wei(30, 'gwei')}
    return w3


@pytest.fixture
def calculator(w3):
    return GasCalculator(w3, GasSettings(
        gas_limit_buffer=1.2,
        default_gas_limit=3000000,
        max_gas_price_gwei=500,
        priority_fee_gwei=2
    ))


class TestDeploymentGas:
    """Test gas limit estimation"""

    @pytest.mark.asyncio
    async def test_estimate_with_buffer(self, calculator):
        constructor = MagicMock()
        constructor.estimate_gas.return_value = 1000000

        gas_limit = await calculator.estimate_deployment_gas(constructor, NODE_ACCOUNT)

        assert gas_limit == 1200000
        constructor.estimate_gas.assert_called_once_with({'from': NODE_ACCOUNT})

    @pytest.mark.asyncio
    async def test_estimation_failure_uses_default(self, calculator):
        constructor = MagicMock()
        constructor.estimate_gas.side_effect = ValueError('estimation unsupported')

        assert await calculator.estimate_deployment_gas(constructor, NODE_ACCOUNT) == 3000000

    @pytest.mark.asyncio
    async def test_constructor_revert(self, calculator):
        constructor = MagicMock()
        constructor.estimate_gas.side_effect = ContractLogicError('execution reverted: not allowed')

        with pytest.raises(RevertError, match="constructor reverted"):
            await calculator.estimate_deployment_gas(constructor, NODE_ACCOUNT)


class TestFeeParams:
    """Test legacy and EIP-1559 fee fields"""

    @pytest.mark.asyncio
    async def test_legacy_gas_price(self, calculator):
        fees = await calculator.get_fee_params(eip1559=False)

        assert fees == {'gasPrice': Web3.to_wei(40, 'gwei')}

    @pytest.mark.asyncio
    async def test_legacy_gas_price_capped(self, w3, calculator):
        w3.eth.gas_price = Web3.to_wei(900, 'gwei')

        fees = await calculator.get_fee_params(eip1559=False)

        assert fees == {'gasPrice': Web3.to_wei(500, 'gwei')}

    @pytest.mark.asyncio
    async def test_eip1559_fees(self, calculator):
        fees = await calculator.get_fee_params(eip1559=True)

        assert fees == {
            'maxFeePerGas': Web3.to_wei(62, 'gwei'),
            'maxPriorityFeePerGas': Web3.to_wei(2, 'gwei')
        }

    @pytest.mark.asyncio
    async def test_rpc_failure(self, w3, calculator):
        w3.eth.get_block.side_effect = ConnectionError('timeout')

        with pytest.raises(SubmissionError, match="gas price"):
            await calculator.get_fee_params(eip1559=True)

    def test_max_cost(self):
        assert GasCalculator.max_cost({'gas': 100, 'gasPrice': 7}) == 700
        assert GasCalculator.max_cost({'gas': 100, 'maxFeePerGas': 9, 'maxPriorityFeePerGas': 1}) == 900
