"""Bot identity and event signing.

The bot's key pair is loaded once at startup and handed to the router
explicitly; nothing else in the process holds the secret key.
"""

import secrets
from typing import Protocol

from coincurve import PrivateKey, PublicKeyXOnly

from game.messaging.events import Event, compute_event_id

_SECRET_KEY_BYTES = 32


class EventSigner(Protocol):
    """Protocol for producing signed events under the bot's identity."""

    @property
    def public_key(self) -> str: ...

    def sign(self, event_id: str) -> str: ...


class SchnorrSigner:
    """BIP-340 Schnorr signer over secp256k1."""

    def __init__(self, secret_key_hex: str) -> None:
        secret = bytes.fromhex(secret_key_hex)
        if len(secret) != _SECRET_KEY_BYTES:
            raise ValueError(f"secret key must be {_SECRET_KEY_BYTES} bytes, got {len(secret)}")
        self._private_key = PrivateKey(secret)
        self._public_key = PublicKeyXOnly.from_secret(secret).format().hex()

    @property
    def public_key(self) -> str:
        return self._public_key

    def sign(self, event_id: str) -> str:
        signature = self._private_key.sign_schnorr(bytes.fromhex(event_id), secrets.token_bytes(32))
        return signature.hex()


def sign_event(
    signer: EventSigner,
    *,
    created_at: int,
    kind: int,
    tags: list[list[str]],
    content: str,
) -> Event:
    """Build an event authored by signer, computing its id and signature."""
    event_id = compute_event_id(signer.public_key, created_at, kind, tags, content)
    return Event(
        id=event_id,
        pubkey=signer.public_key,
        created_at=created_at,
        kind=kind,
        tags=tags,
        content=content,
        sig=signer.sign(event_id),
    )
