"""Signature verification for registry permissions.

Permissions are secp256k1 signatures over a 32-byte message hash (see
:mod:`identity_registry.identity.messages`). Wallets differ in what they
actually sign, so :func:`is_signed` accepts either

- the raw message hash, or
- the EIP-191 "personal message" form:
  ``keccak256("\\x19Ethereum Signed Message:\\n32" || hash)``.

Verification recovers the signer's address and compares it with the claimed
one. Malformed signatures never raise; they simply do not verify.
"""

from __future__ import annotations

from dataclasses import dataclass

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_keys import keys
from eth_keys.exceptions import BadSignature
from eth_keys.exceptions import ValidationError as KeyValidationError
from eth_utils import decode_hex, keccak

from identity_registry.core.exceptions import ValidationError

PERSONAL_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n32"

# Recovery ids as they appear on the wire
_V_OFFSET = 27
_VALID_V = (27, 28)


@dataclass(frozen=True)
class Signature:
    """A recoverable secp256k1 signature in ``(v, r, s)`` form.

    Attributes:
        v: Recovery id, 27 or 28 for a well-formed signature.
        r: The ``r`` scalar.
        s: The ``s`` scalar.
    """

    v: int
    r: int
    s: int

    @classmethod
    def from_bytes(cls, raw: bytes) -> Signature:
        """Parse the 65-byte ``r || s || v`` encoding."""
        if len(raw) != 65:
            raise ValidationError("Signature must be 65 bytes", field="signature", value=len(raw))
        return cls(
            v=raw[64],
            r=int.from_bytes(raw[0:32], "big"),
            s=int.from_bytes(raw[32:64], "big"),
        )

    @classmethod
    def from_hex(cls, value: str) -> Signature:
        return cls.from_bytes(decode_hex(value))

    def to_bytes(self) -> bytes:
        return self.r.to_bytes(32, "big") + self.s.to_bytes(32, "big") + bytes([self.v])

    def to_hex(self) -> str:
        return "0x" + self.to_bytes().hex()


def prefixed_hash(message_hash: bytes) -> bytes:
    """Return the EIP-191 personal-message digest of a 32-byte hash."""
    return keccak(PERSONAL_MESSAGE_PREFIX + message_hash)


def recover_signer(message_hash: bytes, signature: Signature) -> str | None:
    """Recover the checksum address that signed ``message_hash``.

    Returns ``None`` for anything that cannot be recovered, mirroring
    ``ecrecover`` returning the zero address.
    """
    if signature.v not in _VALID_V:
        return None
    try:
        sig = keys.Signature(vrs=(signature.v - _V_OFFSET, signature.r, signature.s))
        public_key = sig.recover_public_key_from_msg_hash(message_hash)
    except (BadSignature, KeyValidationError, ValueError, TypeError):
        return None
    return public_key.to_checksum_address()


def is_signed(address: str, message_hash: bytes, signature: Signature | bytes) -> bool:
    """Check that ``address`` signed ``message_hash``, raw or prefixed.

    Args:
        address: The claimed signer (checksum address).
        message_hash: The 32-byte permission hash.
        signature: A :class:`Signature` or its 65-byte encoding.

    Returns:
        ``True`` if either form of the hash recovers to ``address``.
    """
    if isinstance(signature, (bytes, bytearray)):
        try:
            signature = Signature.from_bytes(bytes(signature))
        except ValidationError:
            return False
    if len(message_hash) != 32:
        return False

    for digest in (message_hash, prefixed_hash(message_hash)):
        signer = recover_signer(digest, signature)
        if signer is not None and signer.lower() == address.lower():
            return True
    return False


# ---------------------------------------------------------------------------
# Client-side helpers
# ---------------------------------------------------------------------------


def _key_bytes(private_key: str | bytes) -> bytes:
    if isinstance(private_key, str):
        return decode_hex(private_key)
    return private_key


def address_of(private_key: str | bytes) -> str:
    """Return the checksum address controlled by ``private_key``."""
    return Account.from_key(_key_bytes(private_key)).address


def sign_message_hash(
    private_key: str | bytes,
    message_hash: bytes,
    prefixed: bool = True,
) -> Signature:
    """Sign a permission hash the way wallets do.

    With ``prefixed=True`` (the default, what ``personal_sign`` produces) the
    EIP-191 prefixed digest is signed; otherwise the raw hash is signed.
    """
    key = _key_bytes(private_key)
    if prefixed:
        signed = Account.sign_message(encode_defunct(primitive=message_hash), private_key=key)
        return Signature(v=signed.v, r=signed.r, s=signed.s)

    raw = keys.PrivateKey(key).sign_msg_hash(message_hash)
    return Signature(v=raw.v + _V_OFFSET, r=raw.r, s=raw.s)
