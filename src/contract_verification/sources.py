"""Metadata and source handling for contract-verification library."""

import json
import os
from typing import Any, Dict, Optional

import requests
from eth_utils import keccak

from .constants import DEFAULT_IPFS_GATEWAY, DEFAULT_SWARM_GATEWAY, DEFAULT_TIMEOUT
from .exceptions import CompilationError, ValidationError
from .logging import get_logger
from .types import CheckedContract, SourceSpec


def source_hash(content: str) -> str:
    """Return the 0x-prefixed keccak256 of a source file, as metadata records it."""
    return "0x" + keccak(text=content).hex()


def checked_contract_from_metadata(
    metadata_raw: str, files: Optional[Dict[str, str]] = None
) -> CheckedContract:
    """
    Pair a metadata document with the uploaded files it references.

    Files are matched by keccak256 first, falling back to the declared path.
    Sources with inline content in the metadata are taken from there.

    Args:
        metadata_raw: Metadata JSON emitted by the compiler
        files: Uploaded files, path -> content

    Returns:
        CheckedContract whose `missing` lists sources still to be fetched

    Raises:
        ValidationError: If the metadata is not valid JSON or has no compilation target
    """
    try:
        metadata = json.loads(metadata_raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Metadata is not valid JSON: {e}") from e

    target = metadata.get("settings", {}).get("compilationTarget", {})
    if len(target) != 1:
        raise ValidationError("Metadata must declare exactly one compilation target")
    compiled_path, name = next(iter(target.items()))

    files = files or {}
    by_hash = {source_hash(content): content for content in files.values()}

    sources: Dict[str, str] = {}
    missing: Dict[str, SourceSpec] = {}
    for path, spec in metadata.get("sources", {}).items():
        expected = spec.get("keccak256", "").lower()
        if "content" in spec:
            sources[path] = spec["content"]
        elif expected in by_hash:
            sources[path] = by_hash[expected]
        elif path in files and not expected:
            sources[path] = files[path]
        else:
            missing[path] = SourceSpec(keccak256=expected, urls=list(spec.get("urls", [])))

    return CheckedContract(
        name=name,
        compiled_path=compiled_path,
        metadata=metadata,
        metadata_raw=metadata_raw,
        sources=sources,
        missing=missing,
    )


def is_complete(contract: CheckedContract) -> bool:
    """Check whether every source referenced by the metadata is present."""
    return not contract.missing


def _gateway_url(url: str, ipfs_gateway: str, swarm_gateway: str) -> Optional[str]:
    if url.startswith("dweb:/ipfs/"):
        return ipfs_gateway + url[len("dweb:/ipfs/") :]
    if url.startswith("bzz-raw://"):
        return swarm_gateway + url[len("bzz-raw://") :]
    if url.startswith(("http://", "https://")):
        return url
    return None


def fetch_missing(
    contract: CheckedContract,
    log: Optional[Any] = None,
    ipfs_gateway: Optional[str] = None,
    swarm_gateway: Optional[str] = None,
) -> None:
    """
    Fill missing sources in place from the URLs listed in the metadata.

    Content is accepted only if its keccak256 matches the metadata.

    Args:
        contract: Contract to complete (mutated)
        log: Logger (defaults to the module logger)
        ipfs_gateway: Defaults to $IPFS_GATEWAY or DEFAULT_IPFS_GATEWAY
        swarm_gateway: Defaults to $SWARM_GATEWAY or DEFAULT_SWARM_GATEWAY

    Raises:
        CompilationError: If some sources could not be retrieved
    """
    if log is None:
        log = get_logger(__name__)
    if ipfs_gateway is None:
        ipfs_gateway = os.environ.get("IPFS_GATEWAY", DEFAULT_IPFS_GATEWAY)
    if swarm_gateway is None:
        swarm_gateway = os.environ.get("SWARM_GATEWAY", DEFAULT_SWARM_GATEWAY)
    loc = "[FETCH_MISSING]"

    for path, spec in list(contract.missing.items()):
        for url in spec.urls:
            fetch_url = _gateway_url(url, ipfs_gateway, swarm_gateway)
            if fetch_url is None:
                continue
            try:
                response = requests.get(fetch_url, timeout=DEFAULT_TIMEOUT)
                response.raise_for_status()
            except requests.RequestException as e:
                log.warning("Source fetch failed", loc=loc, source=path, url=fetch_url, err=str(e))
                continue

            if source_hash(response.text) != spec.keccak256:
                log.warning("Fetched source hash mismatch", loc=loc, source=path, url=fetch_url)
                continue

            contract.sources[path] = response.text
            del contract.missing[path]
            log.info("Fetched missing source", loc=loc, source=path, url=fetch_url)
            break

    if contract.missing:
        raise CompilationError(
            f"Could not fetch missing sources: {', '.join(sorted(contract.missing))}"
        )
