"""Data types and dataclasses for contract-verification library."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class MatchStatus(Enum):
    """
    Outcome of comparing deployed and recompiled bytecode.

    Value strings define de/serialization law.
    """

    EXACT = "perfect"
    PARTIAL = "partial"
    NONE = "none"


class MatchQuality(Enum):
    """Persisted confidence tier of a verified contract."""

    FULL = "full"
    PARTIAL = "partial"

    @classmethod
    def from_status(cls, status: MatchStatus) -> Optional["MatchQuality"]:
        """Map a match status to its quality tier (None for no match)."""
        if status is MatchStatus.EXACT:
            return cls.FULL
        if status is MatchStatus.PARTIAL:
            return cls.PARTIAL
        return None

    @property
    def directory(self) -> str:
        """Repository directory name for this tier."""
        return f"{self.value}_match"


@dataclass(frozen=True)
class Chain:
    """Read-only configuration of a supported chain."""

    chain_id: str
    name: str
    rpc: tuple[str, ...]  # First entry is used for reads
    archive_rpc: Optional[str] = None
    contract_fetch_address: Optional[str] = None  # Explorer URL template with {address}
    tx_regex: Optional[str] = None
    graphql_fetch_address: Optional[str] = None


@dataclass(frozen=True)
class CompiledArtifact:
    """Recompilation output for the compilation target."""

    runtime_bytecode: str
    creation_bytecode: str
    metadata: str  # Raw metadata JSON as emitted by the compiler


@dataclass
class SourceSpec:
    """A source file declared in metadata but not (yet) supplied."""

    keccak256: str
    urls: List[str] = field(default_factory=list)


@dataclass
class CheckedContract:
    """A metadata document paired with the sources it references."""

    name: str
    compiled_path: str
    metadata: Dict[str, Any]
    metadata_raw: str
    sources: Dict[str, str] = field(default_factory=dict)
    missing: Dict[str, SourceSpec] = field(default_factory=dict)


@dataclass
class VerificationRequest:
    """Candidate addresses on a chain plus the contract to verify against them."""

    chain: str
    addresses: List[Optional[str]]
    contract: CheckedContract

    # Known bytecode short-circuits address resolution
    bytecode: Optional[str] = None
    creation_data: Optional[str] = None


@dataclass
class MatchResult:
    """Result of matching recompiled bytecode against deployed bytecode."""

    address: Optional[str]
    status: MatchStatus
    constructor_args: Optional[str] = None  # ABI-encoded, 0x-prefixed
    message: Optional[str] = None


@dataclass(frozen=True)
class StorageTarget:
    """Routing key for a persisted file."""

    match_quality: MatchQuality
    chain: str
    address: str
    file_name: str
    source: bool = False  # Stored under the sources/ sub-directory
