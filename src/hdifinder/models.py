"""Value types shared by the planner, the workers and the coordinator."""

from dataclasses import dataclass

from hdifinder.errors import InvalidConfiguration
from hdifinder.hd_key import HARDENED_OFFSET

# address indices are non-hardened BIP32 children
MAX_INDEX = HARDENED_OFFSET


@dataclass(frozen=True)
class SearchRange:
    """Half-open index range ``[start, end)``."""

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0:
            raise InvalidConfiguration(f"start index must be >= 0, got {self.start}")
        if self.start > self.end:
            raise InvalidConfiguration(f"start ({self.start}) is greater than end ({self.end})")
        if self.end > MAX_INDEX:
            raise InvalidConfiguration(f"end must be <= 2**31 (last address index + 1), got {self.end}")

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class ChunkSpec:
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def indices(self) -> range:
        return range(self.start, self.end)


@dataclass(frozen=True)
class Candidate:
    kind: str
    value: str


@dataclass(frozen=True)
class MatchResult:
    index: int
    value: str
    kind: str
