"""Parallel search for the HD wallet index that derives a given address."""

from hdifinder.errors import DerivationError, HDFinderError, InvalidConfiguration
from hdifinder.models import Candidate, ChunkSpec, MatchResult, SearchRange
from hdifinder.search import plan_chunks, scan_chunk, search
from hdifinder.wallet import WalletContext, derive_candidates

__version__ = "0.1.0"

__all__ = [
    "Candidate",
    "ChunkSpec",
    "DerivationError",
    "HDFinderError",
    "InvalidConfiguration",
    "MatchResult",
    "SearchRange",
    "WalletContext",
    "derive_candidates",
    "plan_chunks",
    "scan_chunk",
    "search",
]
