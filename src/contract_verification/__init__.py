"""
contract-verification: verify Solidity sources against deployed EVM bytecode
"""

from importlib.metadata import PackageNotFoundError, version

from .chains import ChainRegistry, load_chains
from .comparison import compare_bytecodes
from .creation import resolve_creation_data
from .exceptions import (
    ChainNotFoundError,
    CompilationError,
    CreationDataNotFoundError,
    MatchError,
    PersistenceError,
    RpcError,
    StrategyError,
    ValidationError,
    VerificationError,
)
from .matching import match_bytecode_to_address
from .paths import derive_storage_path
from .sources import checked_contract_from_metadata
from .storage import RepositoryStore
from .types import (
    Chain,
    CheckedContract,
    CompiledArtifact,
    MatchQuality,
    MatchResult,
    MatchStatus,
    StorageTarget,
    VerificationRequest,
)
from .verifier import Verifier

try:
    __version__ = version("contract-verification")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "Verifier",
    "ChainRegistry",
    "load_chains",
    "compare_bytecodes",
    "resolve_creation_data",
    "match_bytecode_to_address",
    "derive_storage_path",
    "checked_contract_from_metadata",
    "RepositoryStore",
    "Chain",
    "CheckedContract",
    "CompiledArtifact",
    "MatchQuality",
    "MatchResult",
    "MatchStatus",
    "StorageTarget",
    "VerificationRequest",
    "VerificationError",
    "ValidationError",
    "ChainNotFoundError",
    "CompilationError",
    "MatchError",
    "StrategyError",
    "CreationDataNotFoundError",
    "RpcError",
    "PersistenceError",
]
