"""
BIP32 private key derivation for the index search.

Public keys come from coincurve (libsecp256k1); ecdsa is used when the C
library is not installed.
"""

import hashlib
import hmac
import struct

import base58

from hdifinder.errors import DerivationError

SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
HARDENED_OFFSET = 0x80000000
MAX_CHILD_INDEX = 0xFFFFFFFF

try:
    from coincurve import PublicKey as _CPublicKey

    def _get_pubkey(privkey_bytes: bytes) -> bytes:
        return _CPublicKey.from_valid_secret(privkey_bytes).format(compressed=True)

    _ENGINE = "coincurve"
except ImportError:
    from ecdsa import SECP256k1, SigningKey

    def _get_pubkey(privkey_bytes: bytes) -> bytes:
        vk = SigningKey.from_string(privkey_bytes, curve=SECP256k1).get_verifying_key()
        return vk.to_string("compressed")

    _ENGINE = "ecdsa"


def get_engine() -> str:
    return _ENGINE


def _hmac_sha512(key: bytes, data: bytes) -> bytes:
    return hmac.new(key, data, hashlib.sha512).digest()


def _check_secret(secret: int) -> None:
    if secret == 0 or secret >= SECP256K1_ORDER:
        raise DerivationError("derived private key is outside the secp256k1 range")


class HDKey:
    """BIP32 extended private key (private key + chain code)."""

    __slots__ = ("privkey", "chaincode", "_pubkey")

    def __init__(self, privkey: bytes, chaincode: bytes):
        self.privkey = privkey
        self.chaincode = chaincode
        self._pubkey = None

    @classmethod
    def from_seed(cls, seed: bytes) -> "HDKey":
        I = _hmac_sha512(b"Bitcoin seed", seed)
        _check_secret(int.from_bytes(I[:32], "big"))
        return cls(I[:32], I[32:])

    @property
    def pubkey(self) -> bytes:
        """Compressed SEC1 public key, computed once."""
        if self._pubkey is None:
            self._pubkey = _get_pubkey(self.privkey)
        return self._pubkey

    def derive_child(self, index: int) -> "HDKey":
        """Derive child ``index``; indices >= 2**31 are hardened."""
        if not 0 <= index <= MAX_CHILD_INDEX:
            raise DerivationError(f"child index {index} is outside [0, 2**32)")
        if index >= HARDENED_OFFSET:
            data = b"\x00" + self.privkey + struct.pack(">I", index)
        else:
            data = self.pubkey + struct.pack(">I", index)
        I = _hmac_sha512(self.chaincode, data)
        tweak = int.from_bytes(I[:32], "big")
        if tweak >= SECP256K1_ORDER:
            raise DerivationError(f"child {index} yields an invalid tweak")
        child_int = (tweak + int.from_bytes(self.privkey, "big")) % SECP256K1_ORDER
        _check_secret(child_int)
        return HDKey(child_int.to_bytes(32, "big"), I[32:])

    def derive_path(self, path: str) -> "HDKey":
        """Derive from path like m/44'/0'/0'/0"""
        parts = [p for p in path.strip().split("/") if p]
        if parts and parts[0] == "m":
            parts = parts[1:]
        key = self
        for part in parts:
            hardened = part.endswith(("'", "h", "H"))
            try:
                idx = int(part.rstrip("'hH"))
            except ValueError:
                raise DerivationError(f"bad path component {part!r} in {path!r}") from None
            if hardened:
                if idx >= HARDENED_OFFSET:
                    raise DerivationError(f"hardened component {part!r} out of range")
                idx += HARDENED_OFFSET
            key = key.derive_child(idx)
        return key

    def wif(self, version: int = 0x80) -> str:
        """Wallet import format for the compressed private key."""
        payload = bytes([version]) + self.privkey + b"\x01"
        return base58.b58encode_check(payload).decode("ascii")
