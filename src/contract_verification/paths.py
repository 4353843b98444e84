"""Path management utilities for contract-verification library."""

import os
import re
from pathlib import Path
from typing import Any, Optional, Union

import base58

from .bytecode import decode_auxdata
from .types import MatchQuality


def get_default_repository_dir() -> Path:
    """
    Get default repository directory.

    Returns:
        $REPOSITORY_PATH if set, otherwise ./repository
    """
    env_path = os.environ.get("REPOSITORY_PATH")
    if env_path:
        return Path(env_path).absolute()
    return Path.cwd() / "repository"


def match_dir(
    repository_root: Union[Path, str], match_quality: MatchQuality, chain: str, address: str
) -> Path:
    """
    Get the directory holding one verified contract.

    Returns:
        <root>/contracts/<full_match|partial_match>/<chain>/<address>
    """
    return Path(repository_root) / "contracts" / match_quality.directory / chain / address


def sanitize_path(original_path: str) -> str:
    """
    Make a source path safe to use as a repository file name.

    Characters outside [a-zA-Z0-9_./-] become "_", and the first dot-only
    path segment (".", "..") is replaced so the path cannot climb out.
    """
    sanitized = re.sub(r"[^a-z0-9_./-]", "_", original_path, flags=re.IGNORECASE)
    return re.sub(r"(^|/)[.]+($|/)", "_", sanitized, count=1)


def _multihash_to_b58(value: Any) -> Optional[str]:
    """Encode a multihash as base58, None unless it is well formed."""
    if not isinstance(value, bytes) or len(value) < 3:
        return None
    # <hash function code><digest length><digest>
    if value[1] != len(value) - 2:
        return None
    return base58.b58encode(value).decode("ascii")


def derive_storage_path(runtime_bytecode: Optional[str]) -> Optional[str]:
    """
    Map the content hash embedded in the bytecode trailer to a storage path.

    Args:
        runtime_bytecode: Runtime bytecode carrying the metadata trailer

    Returns:
        "/swarm/bzzr0/<hex>", "/swarm/bzzr1/<hex>" or "/ipfs/<base58 multihash>",
        None if the trailer is missing, malformed or carries no content hash
    """
    auxdata = decode_auxdata(runtime_bytecode)
    if auxdata is None:
        return None

    for key in ("bzzr0", "bzzr1"):
        value = auxdata.get(key)
        if isinstance(value, bytes) and value:
            return f"/swarm/{key}/{value.hex()}"

    ipfs_hash = _multihash_to_b58(auxdata.get("ipfs"))
    if ipfs_hash:
        return f"/ipfs/{ipfs_hash}"

    return None
