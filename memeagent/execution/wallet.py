import json

from solders.keypair import Keypair

from ..exceptions import CredentialError


def load_keypair(secret: str) -> Keypair:
    """Parse a wallet secret exported as a JSON array of 64 integers.

    Raises:
        CredentialError: if the secret is missing or not a valid keypair
    """
    if not secret:
        raise CredentialError("PHANTOM_PRIVATE_KEY is not set")
    try:
        raw = json.loads(secret)
        return Keypair.from_bytes(bytes(raw))
    except Exception as exc:  # noqa: BLE001  solders raises its own error types
        raise CredentialError(f"Failed to load wallet: {exc}") from exc
