"""Tests for BIP32 key derivation."""

from __future__ import annotations

import pytest

from conftest import INDEX_5
from hdifinder.errors import DerivationError
from hdifinder.hd_key import HARDENED_OFFSET, HDKey, get_engine
from hdifinder.wallet import mnemonic_to_seed

# BIP32 test vector 1
TV1_SEED = bytes.fromhex("000102030405060708090a0b0c0d0e0f")


class TestFromSeed:
    def test_master_pubkey(self) -> None:
        """Master key matches BIP32 test vector 1."""
        master = HDKey.from_seed(TV1_SEED)
        assert master.pubkey.hex() == (
            "0339a36013301597daef41fbe593a02cc513d0b55527ec2df1050e2e8ff49c85c2"
        )

    def test_hardened_child(self) -> None:
        """m/0' matches BIP32 test vector 1."""
        child = HDKey.from_seed(TV1_SEED).derive_path("m/0'")
        assert child.pubkey.hex() == (
            "035a784662a4a20a65bf6aab9ae98a6c068a81c52e4b032c0fb5400c706cfccc56"
        )

    def test_path_suffix_variants(self) -> None:
        """h, H and ' all mark a hardened component."""
        master = HDKey.from_seed(TV1_SEED)
        expected = master.derive_path("m/0'/1").privkey
        assert master.derive_path("m/0h/1").privkey == expected
        assert master.derive_path("0H/1").privkey == expected


class TestDeriveChild:
    @pytest.fixture()
    def account(self, phrase: str) -> HDKey:
        return HDKey.from_seed(mnemonic_to_seed(phrase)).derive_path("m/44'/0'/0'/0")

    def test_known_address_index(self, account: HDKey) -> None:
        """Index 5 of the fixture phrase gives the known key pair."""
        child = account.derive_child(5)
        assert child.pubkey.hex() == INDEX_5["pubkey"]
        assert child.wif() == INDEX_5["wif"]

    def test_pubkey_is_cached(self, account: HDKey) -> None:
        child = account.derive_child(1)
        assert child.pubkey is child.pubkey

    @pytest.mark.parametrize("index", [-1, 2**32])
    def test_out_of_range_index(self, account: HDKey, index: int) -> None:
        with pytest.raises(DerivationError):
            account.derive_child(index)

    def test_bad_path_component(self) -> None:
        with pytest.raises(DerivationError):
            HDKey.from_seed(TV1_SEED).derive_path("m/44'/x/0")

    def test_hardened_component_overflow(self) -> None:
        with pytest.raises(DerivationError):
            HDKey.from_seed(TV1_SEED).derive_path(f"m/{HARDENED_OFFSET}'")


def test_engine_name() -> None:
    assert get_engine() in ("coincurve", "ecdsa")
