import json

import pytest
from solders.keypair import Keypair

from memeagent.config.settings import load_settings
from memeagent.exceptions import ConfigurationError, CredentialError
from memeagent.execution.factory import create_execution_venue
from memeagent.execution.jupiter_trading import JupiterExecutionVenue
from memeagent.execution.paper_trading import PaperExecutionVenue
from memeagent.execution.wallet import load_keypair


def _secret(keypair: Keypair) -> str:
    return json.dumps(list(bytes(keypair)))


async def _resolver(symbol):
    return None


def test_load_keypair_round_trips_json_array():
    keypair = Keypair()

    assert load_keypair(_secret(keypair)).pubkey() == keypair.pubkey()


@pytest.mark.parametrize("secret", ["", "not json", "[1, 2, 3]", '{"a": 1}'])
def test_load_keypair_rejects_bad_secrets(secret):
    with pytest.raises(CredentialError):
        load_keypair(secret)


def test_factory_defaults_to_paper():
    settings = load_settings(_env_file=None)

    assert isinstance(create_execution_venue(settings), PaperExecutionVenue)


def test_factory_live_requires_key():
    settings = load_settings(_env_file=None, trading_mode="live")

    with pytest.raises(CredentialError):
        create_execution_venue(settings, mint_resolver=_resolver)


def test_factory_live_rejects_bad_key():
    settings = load_settings(
        _env_file=None, trading_mode="live", phantom_private_key="[0, 1]"
    )

    with pytest.raises(CredentialError):
        create_execution_venue(settings, mint_resolver=_resolver)


def test_factory_live_requires_mint_resolver():
    settings = load_settings(
        _env_file=None, trading_mode="live", phantom_private_key=_secret(Keypair())
    )

    with pytest.raises(ConfigurationError):
        create_execution_venue(settings)


def test_factory_live_builds_jupiter_venue():
    keypair = Keypair()
    settings = load_settings(
        _env_file=None, trading_mode="live", phantom_private_key=_secret(keypair)
    )

    venue = create_execution_venue(settings, mint_resolver=_resolver)

    assert isinstance(venue, JupiterExecutionVenue)
    assert venue.public_key == keypair.pubkey()
