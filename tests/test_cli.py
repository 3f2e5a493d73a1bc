"""
Tests for the deployment entry point
Output contract: one stdout line on success, error on stderr, exit code 0/1
"""

import json
import pytest
from unittest.mock import AsyncMock, patch

from deployer import cli
from deployer.config import DeploymentConfig, NetworkProfile
from deployer.errors import ConfigurationError, ResolutionError
from deployer.result import DeploymentResult


ADDRESS = '0xABc0000000000000000000000000000000000123'


@pytest.fixture
def config():
    return DeploymentConfig(
        network=NetworkProfile(
            key='localhost',
            name='Hardhat Local',
            http_urls=('http://127.0.0.1:8545',),
            chain_id=31337
        )
    )


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch('deployer.cli.configure_logging'):
        yield


def run_main(config, result):
    with patch('deployer.cli.load_config', return_value=config), \
            patch('deployer.cli.Deployer') as Deployer:
        Deployer.return_value.deploy = AsyncMock(return_value=result)
        exit_code = cli.main()
    return exit_code, Deployer


class TestMain:
    """Test exit codes and output"""

    def test_success_prints_address(self, config, capsys):
        result = DeploymentResult.success('VaultGateProtocol', ADDRESS, tx_hash='0x' + 'aa' * 32)

        exit_code, Deployer = run_main(config, result)

        captured = capsys.readouterr()
        assert exit_code == 0
        assert captured.out == f"VaultGateProtocol contract deployed to: {ADDRESS}\n"
        Deployer.assert_called_once_with(config)
        Deployer.return_value.deploy.assert_awaited_once()

    def test_resolution_failure(self, config, capsys):
        error = ResolutionError("Artifact for contract 'VaultGateProtocol' not found in artifacts")
        result = DeploymentResult.failure('VaultGateProtocol', error)

        exit_code, _ = run_main(config, result)

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == ''
        assert "Artifact for contract 'VaultGateProtocol' not found" in captured.err

    def test_configuration_failure(self, capsys):
        with patch('deployer.cli.load_config', side_effect=ConfigurationError("Unknown network 'mainnet'")), \
                patch('deployer.cli.Deployer') as Deployer:
            exit_code = cli.main()

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == ''
        assert "Unknown network 'mainnet'" in captured.err
        Deployer.assert_not_called()


class TestMainWithoutMocks:
    """Run main() against a real config file and an empty artifacts dir"""

    def test_missing_artifact_exits_1(self, tmp_path, monkeypatch, capsys):
        config_dir = tmp_path / 'config'
        config_dir.mkdir()
        config_path = config_dir / 'deploy_config.json'
        config_path.write_text(json.dumps({
            'contract_name': 'VaultGateProtocol',
            'artifacts_dir': 'artifacts',
            'default_network': 'localhost',
            'networks': {
                'localhost': {'name': 'Hardhat Local', 'http_urls': ['http://127.0.0.1:8545']}
            }
        }))

        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv('DEPLOY_CONFIG', str(config_path))
        monkeypatch.delenv('DEPLOY_NETWORK', raising=False)
        monkeypatch.delenv('DEPLOYER_PRIVATE_KEY', raising=False)
        monkeypatch.delenv('DEPLOY_CONSTRUCTOR_ARGS', raising=False)

        exit_code = cli.main()

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == ''
        assert 'npx hardhat compile' in captured.err
