from __future__ import annotations

from launchpad.core.structures.structures import DeploymentRequest
from launchpad.core.wizard.steps import WizardState, next_step, render_prompt
from launchpad.core.wizard.wizard import next_state

EVM_KEY = "0x" + "11" * 32


def _evm_request(**overrides) -> DeploymentRequest:
    fields = dict(
        blockchain="evm",
        network="sepolia",
        name="My Token",
        symbol="MTK",
        decimals=18,
        supply="1000000",
        credentials=EVM_KEY,
    )
    fields.update(overrides)
    return DeploymentRequest(**fields)


def _prompt(request: DeploymentRequest) -> str:
    return render_prompt(next_step(request), request)


def test_empty_request_asks_for_blockchain():
    request = DeploymentRequest()
    assert next_state(request) is WizardState.BLOCKCHAIN
    message = _prompt(request)
    assert "Welcome to OpenCoins Launchpad" in message
    assert "Step 1/8: Choose Blockchain" in message


def test_blockchain_only_asks_for_network_with_live_listing():
    request = DeploymentRequest(blockchain="evm")
    assert next_state(request) is WizardState.NETWORK
    message = _prompt(request)
    assert "You chose **EVM**" in message
    assert "  - sepolia" in message
    assert "  - bscTestnet" in message
    assert "devnet" not in message.split("Tip")[0]


def test_solana_network_prompt_lists_solana_clusters():
    message = _prompt(DeploymentRequest(blockchain="Solana"))
    assert "  - devnet" in message
    assert "  - sepolia" not in message


def test_unrecognised_blockchain_is_asked_again():
    request = DeploymentRequest(blockchain="bitcoin", network="mainnet")
    assert next_state(request) is WizardState.BLOCKCHAIN
    assert "Unknown blockchain 'bitcoin'" in _prompt(request)


def test_first_missing_field_wins_over_later_fields():
    request = _evm_request(name=None, create_pool="yes")
    assert next_state(request) is WizardState.NAME

    request = _evm_request(decimals=None, pool_token_amount="10")
    assert next_state(request) is WizardState.DECIMALS


def test_zero_decimals_counts_as_answered():
    assert next_state(_evm_request(decimals=0, supply=None)) is WizardState.SUPPLY


def test_decimals_prompt_suggests_family_default():
    assert "Recommended: **18**" in _prompt(_evm_request(decimals=None, supply=None, credentials=None))
    solana = DeploymentRequest(blockchain="solana", network="devnet", name="X", symbol="X")
    assert "Recommended: **9**" in _prompt(solana)


def test_complete_token_fields_ask_about_pool():
    request = _evm_request()
    assert next_state(request) is WizardState.CREATE_POOL
    message = _prompt(request)
    assert "Step 8/8" in message
    assert "Uniswap V2" in message


def test_credentials_prompt_differs_per_family():
    assert "private key" in _prompt(_evm_request(credentials=None))
    solana = DeploymentRequest(blockchain="solana", network="devnet", name="X", symbol="X", decimals=9, supply="1")
    assert "Solana keypair" in _prompt(solana)


def test_evm_pool_skips_dex_choice():
    request = _evm_request(create_pool="yes")
    assert next_state(request) is WizardState.POOL_TOKEN_AMOUNT
    assert "Step 9/10" in _prompt(request)


def test_solana_pool_inserts_dex_choice_before_amounts():
    request = DeploymentRequest(
        blockchain="solana", network="devnet", name="X", symbol="X", decimals=9, supply="1",
        credentials="[1]", create_pool="YES",
    )
    assert next_state(request) is WizardState.DEX_CHOICE
    message = _prompt(request)
    assert "Step 9/11: Choose DEX (Solana)" in message
    assert "Raydium" in message and "Meteora" in message and "Jupiter" in message

    request.dex_choice = "meteora"
    assert next_state(request) is WizardState.POOL_TOKEN_AMOUNT
    request.pool_token_amount = "500"
    assert next_state(request) is WizardState.POOL_BASE_AMOUNT
    assert "SOL amount for pool?" in _prompt(request)


def test_base_amount_prompt_uses_network_currency():
    request = _evm_request(network="bsc", create_pool="yes", pool_token_amount="500")
    message = _prompt(request)
    assert "Step 10/10: BNB Amount for Pool" in message
    assert "Pool tokens: **500**" in message


def test_anything_but_yes_means_no_pool():
    assert next_state(_evm_request(create_pool="no")) is WizardState.DEPLOYING
    assert next_state(_evm_request(create_pool="maybe")) is WizardState.DEPLOYING
    assert next_state(_evm_request(create_pool="yes please")) is WizardState.DEPLOYING


def test_dex_choice_is_ignored_for_evm():
    request = _evm_request(create_pool="yes", dex_choice="raydium", pool_token_amount="1", pool_base_amount="1")
    assert next_state(request) is WizardState.DEPLOYING
