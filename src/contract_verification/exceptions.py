"""Custom exception classes for contract-verification library."""


class VerificationError(Exception):
    """Base exception for verification-related errors."""

    pass


class ValidationError(VerificationError, ValueError):
    """Raised when a verification request is malformed (no chain, no addresses)."""

    pass


class ChainNotFoundError(ValidationError):
    """Raised when requested chain is not in the registry."""

    pass


class CompilationError(VerificationError, RuntimeError):
    """Raised when sources cannot be completed or recompiled."""

    pass


class MatchError(VerificationError, ValueError):
    """Raised when no candidate address matches the recompiled bytecode."""

    pass


class StrategyError(VerificationError, RuntimeError):
    """Raised by a single creation data retrieval strategy."""

    pass


class CreationDataNotFoundError(VerificationError, LookupError):
    """Raised when no creation data strategy is configured or all of them failed."""

    pass


class RpcError(VerificationError, RuntimeError):
    """Raised when a JSON-RPC call fails at the HTTP, network or protocol level."""

    pass


class PersistenceError(VerificationError, OSError):
    """Raised when verified artifacts cannot be written to the repository."""

    pass
