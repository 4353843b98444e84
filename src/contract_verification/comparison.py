"""Bytecode comparison for contract-verification library."""

from typing import Callable, Optional

from .bytecode import normalize_hex, trim_metadata
from .exceptions import CreationDataNotFoundError
from .types import MatchResult, MatchStatus


def extract_constructor_args(creation_data: str, compiled_creation: str) -> Optional[str]:
    """
    Return the ABI-encoded constructor arguments following the creation bytecode.

    Args:
        creation_data: Transaction input that deployed the contract
        compiled_creation: Recompiled creation bytecode, a prefix of creation_data

    Returns:
        0x-prefixed suffix, or None if the contract takes no arguments
    """
    suffix = creation_data[len(compiled_creation) :]
    if not suffix:
        return None
    return "0x" + suffix


def compare_bytecodes(
    deployed: Optional[str],
    creation_data: Optional[str],
    compiled_runtime: str,
    compiled_creation: str,
    fetch_creation_data: Callable[[], str],
) -> MatchResult:
    """
    Classify how closely deployed bytecode matches recompiled bytecode.

    Tiers, first success wins:
    1. deployed runtime == compiled runtime → exact
    2. equal after stripping both metadata trailers → partial
    3. same trimmed size: creation data starts with compiled creation bytecode
       → exact (suffix holds constructor args), or starts with the trimmed
       creation bytecode → partial

    Args:
        deployed: Runtime bytecode at the address (None if unavailable)
        creation_data: Creation transaction input, if already known
        compiled_runtime: Recompiled runtime bytecode
        compiled_creation: Recompiled creation bytecode
        fetch_creation_data: Called at most once, only when step 3 is reached
                             without creation_data

    Returns:
        MatchResult with address unset
    """
    deployed = normalize_hex(deployed)
    if not deployed or deployed == "0x":
        return MatchResult(address=None, status=MatchStatus.NONE)

    compiled_runtime = normalize_hex(compiled_runtime)
    compiled_creation = normalize_hex(compiled_creation)

    if deployed == compiled_runtime:
        return MatchResult(address=None, status=MatchStatus.EXACT)

    trimmed_deployed = trim_metadata(deployed)
    trimmed_compiled_runtime = trim_metadata(compiled_runtime)
    if trimmed_deployed == trimmed_compiled_runtime:
        return MatchResult(address=None, status=MatchStatus.PARTIAL)

    # Different code size means a different program; skip the historical lookup
    if len(trimmed_deployed) != len(trimmed_compiled_runtime):
        return MatchResult(address=None, status=MatchStatus.NONE)

    if not creation_data:
        try:
            creation_data = fetch_creation_data()
        except CreationDataNotFoundError:
            return MatchResult(address=None, status=MatchStatus.NONE)

    creation_data = normalize_hex(creation_data)
    if not creation_data or creation_data == "0x":
        return MatchResult(address=None, status=MatchStatus.NONE)

    # startswith rather than ==: constructor arguments are appended to the input
    if creation_data.startswith(compiled_creation):
        return MatchResult(
            address=None,
            status=MatchStatus.EXACT,
            constructor_args=extract_constructor_args(creation_data, compiled_creation),
        )

    if creation_data.startswith(trim_metadata(compiled_creation)):
        return MatchResult(address=None, status=MatchStatus.PARTIAL)

    return MatchResult(address=None, status=MatchStatus.NONE)
