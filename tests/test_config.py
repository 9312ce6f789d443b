from pathlib import Path

import pytest

from zkship.config import (
    DEFAULT_ACCOUNT_ID,
    DEFAULT_PROVER_URL,
    MAX_GAS,
    NearConfig,
    Settings,
)
from zkship.errors import InvalidConfigError


def test_testnet_endpoints():
    config = NearConfig.for_network('testnet')
    assert config.node_url == 'https://rpc.testnet.near.org'
    assert config.wallet_url == 'https://wallet.testnet.near.org'
    assert config.helper_url == 'https://helper.testnet.near.org'
    assert config.explorer_url == 'https://explorer.testnet.near.org'
    assert config.key_store == Path.home() / '.near-credentials'


def test_defaults_from_empty_env():
    settings = Settings.from_env({})
    assert settings.near.network_id == 'testnet'
    assert settings.account_id == DEFAULT_ACCOUNT_ID
    assert settings.contract_id == DEFAULT_ACCOUNT_ID
    assert settings.prover_url == DEFAULT_PROVER_URL
    assert settings.gas == MAX_GAS == 300000000000000


def test_env_values_and_overrides():
    env = {
        'ZKSHIP_NETWORK': 'mainnet',
        'ZKSHIP_ACCOUNT_ID': 'alice.near',
        'ZKSHIP_CONTRACT_ID': 'game.near',
        'ZKSHIP_PROVER_URL': 'http://prover:3000/',
        'ZKSHIP_CREDENTIALS_DIR': '/tmp/creds',
    }
    settings = Settings.from_env(env, account_id='bob.near', gas=None)
    assert settings.near.node_url == 'https://rpc.mainnet.near.org'
    assert settings.near.key_store == Path('/tmp/creds')
    assert settings.account_id == 'bob.near'
    assert settings.contract_id == 'game.near'
    assert settings.prover_url == 'http://prover:3000'


@pytest.mark.parametrize('gas', ['0', str(MAX_GAS + 1), 'lots'])
def test_bad_gas_rejected(gas):
    with pytest.raises(InvalidConfigError):
        Settings.from_env({'ZKSHIP_GAS': gas})


def test_empty_account_rejected():
    with pytest.raises(InvalidConfigError):
        Settings(account_id='')


def test_prover_timeout_unset_by_default():
    assert Settings.from_env({}).prover_timeout is None


def test_prover_timeout_from_env_and_override():
    assert Settings.from_env({'ZKSHIP_PROVER_TIMEOUT': '900'}).prover_timeout == 900.0
    settings = Settings.from_env({'ZKSHIP_PROVER_TIMEOUT': '900'}, prover_timeout=60.0)
    assert settings.prover_timeout == 60.0


@pytest.mark.parametrize('timeout', ['0', '-1', 'soon'])
def test_bad_prover_timeout_rejected(timeout):
    with pytest.raises(InvalidConfigError):
        Settings.from_env({'ZKSHIP_PROVER_TIMEOUT': timeout})
