"""Main API for contract-verification library."""

import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from eth_utils import is_hex_address

from .chains import ChainRegistry
from .comparison import compare_bytecodes
from .compiler import recompile
from .constants import CONSTRUCTOR_ARGS_FILE_NAME, METADATA_FILE_NAME, MSG_NO_MATCH_FALLBACK
from .creation import resolve_creation_data
from .exceptions import (
    ChainNotFoundError,
    CompilationError,
    CreationDataNotFoundError,
    MatchError,
    PersistenceError,
    ValidationError,
)
from .logging import get_logger, new_verification_logger
from .matching import match_bytecode_to_address
from .paths import derive_storage_path, sanitize_path
from .rpc import checksum_address
from .sources import fetch_missing, is_complete
from .storage import RepositoryStore
from .types import (
    CheckedContract,
    CompiledArtifact,
    MatchQuality,
    MatchResult,
    MatchStatus,
    StorageTarget,
    VerificationRequest,
)

CompileFn = Callable[[Dict[str, Any], Dict[str, str], Any], CompiledArtifact]
FetchMissingFn = Callable[[CheckedContract, Any], None]


class Verifier:
    """Verifies submitted sources against deployed bytecode and stores the result."""

    def __init__(
        self,
        chains: ChainRegistry,
        store: RepositoryStore,
        compile_fn: CompileFn = recompile,
        fetch_missing_fn: FetchMissingFn = fetch_missing,
        resolver: Callable[..., str] = resolve_creation_data,
        log: Optional[Any] = None,
    ):
        """
        Initialize the verifier.

        Args:
            chains: Read-only chain registry
            store: Repository the verified artifacts are written to
            compile_fn: Recompiles (metadata, sources, log) into a CompiledArtifact
            fetch_missing_fn: Completes a contract's sources in place
            resolver: Creation data resolver (chain, address, log) -> creation data
            log: Base logger; each verification binds its own id onto it
        """
        self.chains = chains
        self.store = store
        self.compile_fn = compile_fn
        self.fetch_missing_fn = fetch_missing_fn
        self.resolver = resolver
        self.log = log if log is not None else get_logger(__name__)

    @classmethod
    def create(
        cls,
        provider_id: Optional[str] = None,
        repository_path: Optional[Union[Path, str]] = None,
        offline: Optional[bool] = None,
        log: Optional[Any] = None,
    ) -> "Verifier":
        """
        Build a verifier from arguments, falling back to the environment.

        Args:
            provider_id: Remote provider id (defaults to $PROVIDER_ID)
            repository_path: Repository root (defaults to $REPOSITORY_PATH or ./repository)
            offline: Skip chain loading (defaults to $OFFLINE)
            log: Base logger
        """
        if provider_id is None:
            provider_id = os.environ.get("PROVIDER_ID")
        if offline is None:
            offline = os.environ.get("OFFLINE", "").strip().lower() in ("1", "true", "yes", "on")

        chains = ChainRegistry.from_config(provider_id=provider_id, offline=offline, log=log)
        return cls(chains, RepositoryStore(repository_path), log=log)

    @staticmethod
    def _validate(request: VerificationRequest) -> None:
        if not request.addresses or any(a is None for a in request.addresses):
            raise ValidationError("Missing address for submitted sources/metadata")
        for address in request.addresses:
            if not is_hex_address(address):
                raise ValidationError(f"Invalid address: {address}")

        if not request.chain or not isinstance(request.chain, str):
            raise ValidationError("Missing chain name for submitted sources/metadata")

    def _compare_known_bytecode(
        self, request: VerificationRequest, compiled: CompiledArtifact, log: Any
    ) -> MatchResult:
        if len(request.addresses) != 1:
            err = "Cannot work with multiple addresses if bytecode is provided"
            log.error(err, loc="[VERIFY]", chain=request.chain, addresses=request.addresses)
            raise MatchError(f"Contract name: {request.contract.name}. {err}")

        address = checksum_address(request.addresses[0])

        def fetch_creation_data() -> str:
            try:
                chain = self.chains.get_chain(request.chain)
            except ChainNotFoundError as e:
                raise CreationDataNotFoundError(str(e)) from e
            return self.resolver(chain, address, log)

        result = compare_bytecodes(
            request.bytecode,
            request.creation_data,
            compiled.runtime_bytecode,
            compiled.creation_bytecode,
            fetch_creation_data,
        )
        result.address = address
        return result

    def _store(
        self,
        request: VerificationRequest,
        compiled: CompiledArtifact,
        result: MatchResult,
        log: Any,
    ) -> None:
        chain = request.chain
        address = result.address

        metadata_path = derive_storage_path(compiled.runtime_bytecode)
        if metadata_path:
            self.store.save_at(metadata_path, compiled.metadata)
            self.store.delete_partial(chain, address)
        else:
            log.error(
                "No metadata hash in cbor encoded data.",
                loc="[VERIFY:GET_METADATA_PATH]",
                chain=chain,
                address=address,
            )
            result.status = MatchStatus.PARTIAL

        quality = MatchQuality.from_status(result.status)

        for source_path, content in request.contract.sources.items():
            self.store.save(
                StorageTarget(quality, chain, address, sanitize_path(source_path), source=True),
                content,
            )

        self.store.save(StorageTarget(quality, chain, address, METADATA_FILE_NAME), compiled.metadata)

        if result.constructor_args:
            self.store.save(
                StorageTarget(quality, chain, address, CONSTRUCTOR_ARGS_FILE_NAME),
                result.constructor_args,
            )

    def verify(self, request: VerificationRequest) -> MatchResult:
        """
        Recompile the submitted contract, match it on chain and store the artifacts.

        When the request carries the deployed bytecode, it is compared directly
        (single address only); otherwise each candidate address is fetched and
        compared in order.

        Args:
            request: Chain, candidate addresses and contract to verify

        Returns:
            MatchResult with status EXACT or PARTIAL

        Raises:
            ValidationError: If chain or addresses are missing or invalid
            CompilationError: If sources cannot be completed or recompiled
            MatchError: If no address matches
            PersistenceError: If the verified artifacts cannot be stored
        """
        self._validate(request)
        log = new_verification_logger(self.log)
        contract = request.contract
        loc = "[VERIFY]"

        chain = None
        if not request.bytecode:
            try:
                chain = self.chains.get_chain(request.chain)
            except ChainNotFoundError as e:
                log.error("Unsupported chain", loc=loc, chain=request.chain, addresses=request.addresses, err=str(e))
                raise ChainNotFoundError(f"Contract name: {contract.name}. {e}") from e

        try:
            if not is_complete(contract):
                self.fetch_missing_fn(contract, log)
            compiled = self.compile_fn(contract.metadata, contract.sources, log)
        except CompilationError as e:
            log.error("Compilation failed", loc=loc, chain=request.chain, addresses=request.addresses, err=str(e))
            raise CompilationError(f"Contract name: {contract.name}. {e}") from e

        if request.bytecode:
            result = self._compare_known_bytecode(request, compiled, log)
        else:
            result = match_bytecode_to_address(
                chain,
                request.addresses,
                compiled.runtime_bytecode,
                compiled.creation_bytecode,
                log,
                resolver=self.resolver,
            )

        if result.status is MatchStatus.NONE or not result.address:
            message = result.message or MSG_NO_MATCH_FALLBACK
            err = f"Contract name: {contract.name}. {message}"
            log.error(err, loc=loc, chain=request.chain, addresses=request.addresses)
            raise MatchError(err)

        try:
            self._store(request, compiled, result, log)
        except PersistenceError as e:
            log.error("Storing verified contract failed", loc=loc, chain=request.chain, address=result.address, err=str(e))
            raise PersistenceError(f"Contract name: {contract.name}. {e}") from e

        log.info(
            "Verified contract",
            loc=loc,
            chain=request.chain,
            address=result.address,
            status=result.status.value,
        )
        return result
