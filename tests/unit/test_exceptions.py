"""Unit tests for custom exception classes."""

import pytest

from contract_verification.exceptions import (
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

ALL_EXCEPTIONS = [
    ValidationError,
    ChainNotFoundError,
    CompilationError,
    MatchError,
    StrategyError,
    CreationDataNotFoundError,
    RpcError,
    PersistenceError,
]


class TestExceptionCatching:
    """Test that exceptions can be caught as their base types."""

    def test_catch_validation_error_as_value_error(self):
        """Test that ValidationError can be caught as ValueError."""
        with pytest.raises(ValueError):
            raise ValidationError("test")

    def test_catch_chain_not_found_as_validation_error(self):
        """Test that ChainNotFoundError can be caught as ValidationError."""
        with pytest.raises(ValidationError):
            raise ChainNotFoundError("test")

    def test_catch_creation_data_not_found_as_lookup_error(self):
        """Test that CreationDataNotFoundError can be caught as LookupError."""
        with pytest.raises(LookupError):
            raise CreationDataNotFoundError("test")

    def test_catch_persistence_error_as_os_error(self):
        """Test that PersistenceError can be caught as OSError."""
        with pytest.raises(OSError):
            raise PersistenceError("test")

    def test_catch_compilation_error_as_runtime_error(self):
        """Test that CompilationError can be caught as RuntimeError."""
        with pytest.raises(RuntimeError):
            raise CompilationError("test")

    def test_strategy_and_not_found_are_distinct(self):
        """Test that a single strategy failure is not a NotFound condition."""
        assert not issubclass(StrategyError, CreationDataNotFoundError)
        assert not issubclass(CreationDataNotFoundError, StrategyError)

    @pytest.mark.parametrize("exc_class", ALL_EXCEPTIONS)
    def test_catch_all_as_verification_error(self, exc_class):
        """Test that all custom exceptions can be caught as VerificationError."""
        with pytest.raises(VerificationError):
            raise exc_class("test")


class TestExceptionCreation:
    """Test creating exceptions with various message types."""

    @pytest.mark.parametrize("exc_class", [VerificationError, *ALL_EXCEPTIONS])
    def test_exceptions_accept_string_messages(self, exc_class):
        """Test that all exceptions accept string messages."""
        assert str(exc_class("test message")) == "test message"
