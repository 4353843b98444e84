"""Candidate address resolution for contract-verification library."""

from typing import Any, Callable, List, Optional

from .comparison import compare_bytecodes
from .constants import (
    MSG_BYTECODE_MISMATCH,
    MSG_CHAIN_UNAVAILABLE,
    MSG_COMPARISON_FAILED,
    MSG_NO_CONTRACT,
)
from .creation import resolve_creation_data
from .exceptions import RpcError
from .logging import get_logger
from .rpc import checksum_address, get_bytecode
from .types import Chain, MatchResult, MatchStatus

CreationDataResolver = Callable[[Chain, str, Any], str]


def _diagnose(chain: Chain, address: str, deployed: Optional[str]) -> str:
    chain_name = chain.name or "The chain"
    if deployed is None:
        return MSG_CHAIN_UNAVAILABLE.format(chain_name=chain_name)
    if deployed == "0x":
        return MSG_NO_CONTRACT.format(chain_name=chain_name, address=address)
    return MSG_BYTECODE_MISMATCH


def match_bytecode_to_address(
    chain: Chain,
    addresses: List[str],
    compiled_runtime: str,
    compiled_creation: str,
    log: Optional[Any] = None,
    resolver: CreationDataResolver = resolve_creation_data,
) -> MatchResult:
    """
    Find the first candidate address whose deployed bytecode matches.

    Candidates are tried in order and the first exact or partial match wins.
    A diagnostic message is attached only when a single candidate was given.

    Args:
        chain: Chain to read bytecode from
        addresses: Candidate addresses
        compiled_runtime: Recompiled runtime bytecode
        compiled_creation: Recompiled creation bytecode
        log: Logger (defaults to the module logger)
        resolver: Creation data resolver, called lazily per address

    Returns:
        Matching MatchResult, or one with status NONE
    """
    if log is None:
        log = get_logger(__name__)
    loc = "[MATCH]"
    single = len(addresses) == 1
    message: Optional[str] = None

    for address in addresses:
        address = checksum_address(address)

        deployed: Optional[str] = None
        log.info("Retrieving contract bytecode address", loc=loc, chain=chain.chain_id, address=address)
        try:
            deployed = get_bytecode(chain.rpc[0], address)
        except RpcError as e:
            log.warning("Bytecode unavailable", loc=loc, chain=chain.chain_id, address=address, err=str(e))

        def fetch_creation_data(address: str = address) -> str:
            return resolver(chain, address, log)

        try:
            result = compare_bytecodes(
                deployed, None, compiled_runtime, compiled_creation, fetch_creation_data
            )
        except Exception as e:
            log.error("Bytecode comparison failed", loc=loc, chain=chain.chain_id, address=address, err=str(e))
            if single:
                message = MSG_COMPARISON_FAILED
            continue

        if result.status is not MatchStatus.NONE:
            result.address = address
            return result

        if single and message is None:
            message = _diagnose(chain, address, deployed)

    return MatchResult(address=None, status=MatchStatus.NONE, message=message)
