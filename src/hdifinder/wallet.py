"""
Wallet context and the per-index candidate derivation used by the search.

``derive_candidates`` is the only thing the search engine knows about keys:
given the shared context and an address index it returns the encoded
addresses for ``m/purpose'/coin'/account'/change/index``.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import List

from mnemonic import Mnemonic

from hdifinder.encoding import NETWORKS, address_candidates
from hdifinder.errors import DerivationError, InvalidConfiguration
from hdifinder.hd_key import HARDENED_OFFSET, HDKey
from hdifinder.models import Candidate

logger = logging.getLogger(__name__)

SUPPORTED_PURPOSES = (44, 49, 84)


@dataclass(frozen=True)
class WalletContext:
    """Seed material and account parameters shared by every worker."""

    seed: bytes
    purpose: int = 44
    coin_type: int = 0
    account: int = 0
    change: int = 0
    network: str = "bitcoin"

    def __post_init__(self):
        if not 16 <= len(self.seed) <= 64:
            raise InvalidConfiguration(f"seed must be 16 to 64 bytes, got {len(self.seed)}")
        if self.purpose not in SUPPORTED_PURPOSES:
            raise InvalidConfiguration(
                f"purpose {self.purpose} not in {', '.join(map(str, SUPPORTED_PURPOSES))}"
            )
        if self.network not in NETWORKS:
            raise InvalidConfiguration(
                f"unknown network {self.network!r}, available: {', '.join(NETWORKS)}"
            )
        for name in ("coin_type", "account"):
            value = getattr(self, name)
            if not 0 <= value < HARDENED_OFFSET:
                raise InvalidConfiguration(f"{name} must be in [0, 2**31), got {value}")
        if self.change not in (0, 1):
            raise InvalidConfiguration(f"change must be 0 or 1, got {self.change}")

    def __repr__(self) -> str:
        # keep seed material out of logs and tracebacks
        return f"WalletContext(path={account_path(self)!r}, network={self.network!r})"

    @classmethod
    def from_mnemonic(
        cls, phrase: str, passphrase: str = "", validate: bool = True, **params
    ) -> "WalletContext":
        return cls(seed=mnemonic_to_seed(phrase, passphrase, validate=validate), **params)


def mnemonic_to_seed(phrase: str, passphrase: str = "", validate: bool = True) -> bytes:
    """BIP39 seed for ``phrase``; rejects phrases failing the checksum when ``validate``."""
    phrase = " ".join(phrase.split())
    if validate and not Mnemonic("english").check(phrase):
        raise InvalidConfiguration("mnemonic is not a valid BIP39 english phrase")
    return Mnemonic.to_seed(phrase, passphrase=passphrase)


def account_path(context: WalletContext) -> str:
    return (
        f"m/{context.purpose}'/{context.coin_type}'/{context.account}'/{context.change}"
    )


@lru_cache(maxsize=8)
def _account_key(context: WalletContext) -> HDKey:
    logger.debug("Deriving account key %s", account_path(context))
    return HDKey.from_seed(context.seed).derive_path(account_path(context))


def derive_candidates(context: WalletContext, index: int) -> List[Candidate]:
    """Addresses at ``index`` as candidates ordered p2pkh, p2wpkh, p2shwpkh."""
    if not 0 <= index < HARDENED_OFFSET:
        raise DerivationError(f"address index {index} is outside [0, 2**31)")
    child = _account_key(context).derive_child(index)
    return [
        Candidate(kind, value)
        for kind, value in address_candidates(child.pubkey, context.network)
    ]


def private_key_wif(context: WalletContext, index: int) -> str:
    """WIF private key at ``index``, for reporting a recovered address."""
    version = 0x80 if context.network == "bitcoin" else 0xEF
    return _account_key(context).derive_child(index).wif(version)
