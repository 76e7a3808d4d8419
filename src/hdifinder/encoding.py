"""
Address encodings for a compressed public key.

Three representations are produced per key, always in the same order:
legacy P2PKH (base58check), native SegWit P2WPKH (bech32) and nested
SegWit P2SH-P2WPKH (base58check).
"""

import hashlib
from typing import Dict, List, Tuple

import base58

BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_BECH32_GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)

# version bytes (p2pkh, p2sh) and bech32 human readable part per network
NETWORKS: Dict[str, Dict] = {
    "bitcoin": {"p2pkh": 0x00, "p2sh": 0x05, "hrp": "bc"},
    "testnet": {"p2pkh": 0x6F, "p2sh": 0xC4, "hrp": "tb"},
}

ADDRESS_KINDS = ("p2pkh", "p2wpkh", "p2shwpkh")


def _ripemd160(data: bytes) -> bytes:
    """RIPEMD160, through pycryptodome when OpenSSL no longer ships it."""
    try:
        return hashlib.new("ripemd160", data).digest()
    except ValueError:
        from Crypto.Hash import RIPEMD160

        return RIPEMD160.new(data).digest()


def hash160(data: bytes) -> bytes:
    return _ripemd160(hashlib.sha256(data).digest())


def base58check(version: int, payload: bytes) -> str:
    return base58.b58encode_check(bytes([version]) + payload).decode("ascii")


def _bech32_polymod(values: List[int]) -> int:
    chk = 1
    for value in values:
        top = chk >> 25
        chk = (chk & 0x1FFFFFF) << 5 ^ value
        for i, gen in enumerate(_BECH32_GENERATOR):
            if (top >> i) & 1:
                chk ^= gen
    return chk


def _bech32_checksum(hrp: str, data: List[int]) -> List[int]:
    expanded = [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]
    polymod = _bech32_polymod(expanded + data + [0] * 6) ^ 1
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]


def _to_five_bit(data: bytes) -> List[int]:
    acc = bits = 0
    out = []
    for byte in data:
        acc = (acc << 8) | byte
        bits += 8
        while bits >= 5:
            bits -= 5
            out.append((acc >> bits) & 31)
    if bits:
        out.append((acc << (5 - bits)) & 31)
    return out


def segwit_v0_address(hrp: str, program: bytes) -> str:
    """bech32 address for a version 0 witness program."""
    data = [0] + _to_five_bit(program)
    checksum = _bech32_checksum(hrp, data)
    return hrp + "1" + "".join(BECH32_CHARSET[d] for d in data + checksum)


def address_candidates(pubkey: bytes, network: str = "bitcoin") -> List[Tuple[str, str]]:
    """Return ``[(kind, address), ...]`` for ``pubkey`` in fixed kind order."""
    params = NETWORKS[network]
    key_hash = hash160(pubkey)
    redeem_script = b"\x00\x14" + key_hash
    addresses = (
        base58check(params["p2pkh"], key_hash),
        segwit_v0_address(params["hrp"], key_hash),
        base58check(params["p2sh"], hash160(redeem_script)),
    )
    return list(zip(ADDRESS_KINDS, addresses))
