"""Search configuration defaults, overridable through environment variables."""

import os
from dataclasses import asdict, dataclass, fields
from typing import Dict, Optional

from hdifinder.errors import InvalidConfiguration
from hdifinder.models import SearchRange
from hdifinder.search import EXECUTORS, STRATEGIES, resolve_workers

ENV_PREFIX = "HDIFINDER_"

DEFAULT_START = 0
DEFAULT_END = 10_000_000
DEFAULT_CHUNK_SIZE = 2500

_TEXT_FIELDS = ("passphrase", "strategy", "executor", "network")
_WALLET_FIELDS = ("purpose", "coin_type", "account", "change", "network")


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(ENV_PREFIX + name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidConfiguration(f"{ENV_PREFIX}{name}={raw!r} is not an integer") from None


@dataclass
class SearchConfig:
    passphrase: str = ""
    start: int = DEFAULT_START
    end: int = DEFAULT_END
    chunk_size: int = DEFAULT_CHUNK_SIZE
    workers: Optional[int] = None  # None = one per CPU
    strategy: str = "first"
    executor: str = "process"
    purpose: int = 44
    coin_type: int = 0
    account: int = 0
    change: int = 0
    network: str = "bitcoin"

    @property
    def search_range(self) -> SearchRange:
        return SearchRange(self.start, self.end)

    def wallet_params(self) -> Dict:
        """Keyword arguments for WalletContext."""
        return {k: v for k, v in asdict(self).items() if k in _WALLET_FIELDS}

    def validate(self) -> "SearchConfig":
        """Raise InvalidConfiguration for any unusable value; return self."""
        if self.chunk_size <= 0:
            raise InvalidConfiguration(f"chunk size must be positive, got {self.chunk_size}")
        SearchRange(self.start, self.end)
        resolve_workers(self.workers)
        if self.strategy not in STRATEGIES:
            raise InvalidConfiguration(f"strategy must be one of {', '.join(STRATEGIES)}")
        if self.executor not in EXECUTORS:
            raise InvalidConfiguration(f"executor must be one of {', '.join(EXECUTORS)}")
        return self

    @classmethod
    def from_env(cls, validate: bool = True) -> "SearchConfig":
        """Build a config from HDIFINDER_* variables; unset ones keep their defaults.

        Pass ``validate=False`` to layer further overrides on before validating.
        Unparsable integers raise either way.
        """
        defaults = cls()
        values = {}
        for f in fields(cls):
            current = getattr(defaults, f.name)
            if f.name in _TEXT_FIELDS:
                values[f.name] = os.getenv(ENV_PREFIX + f.name.upper(), current)
            else:
                values[f.name] = _env_int(f.name.upper(), current)
        config = cls(**values)
        return config.validate() if validate else config
