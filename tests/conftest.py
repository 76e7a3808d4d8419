"""Shared fixtures."""

from __future__ import annotations

import os

import pytest

from hdifinder.wallet import WalletContext

PHRASE = (
    "erupt quit sphere taxi air decade vote mixed life elevator mammal search "
    "empower rabbit barely indoor crush grid slide correct scatter deal tenant verb"
)

# m/44'/0'/0'/0/5 of PHRASE with an empty passphrase
INDEX_5 = {
    "wif": "L1TmQPcEkfoxHh6pJdbVASwiq18BpF3waAKf9LaannZWvLr4p2DF",
    "pubkey": "02016653fa405f3ecedb3dc88a378dabf7cd4c1c1acf1430515e854a630254cbbe",
    "p2pkh": "14odE5c1eXuphR24fXMtzDfsXMLCmFTFgK",
    "p2wpkh": "bc1q9xuuqjdz920rkcs0kvnmqh0t4anmgtk5u60h0y",
    "p2shwpkh": "39gFyg2s6bp5AwwqtCrH7iNqRBh664LnZg",
}

# p2pkh at m/44'/0'/0'/0/15
INDEX_15_P2PKH = "15Wbvv7V9yWLCr3pxmPSFsAS3NSyQyqeA3"


@pytest.fixture(scope="session")
def phrase() -> str:
    return PHRASE


@pytest.fixture(scope="session")
def context() -> WalletContext:
    return WalletContext.from_mnemonic(PHRASE)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("HDIFINDER_"):
            monkeypatch.delenv(name)
