"""Shared pytest fixtures for contract-verification tests."""

import json
from pathlib import Path
from typing import Any, Callable, Dict

import cbor2
import pytest
import responses

from contract_verification.sources import source_hash
from contract_verification.types import Chain, CheckedContract, CompiledArtifact

RPC_URL = "http://rpc.example.com"
ARCHIVE_URL = "http://archive.example.com"
EXPLORER_URL = "http://explorer.example.com/address/{address}"
GRAPHQL_URL = "http://graphql.example.com"
TX_REGEX = r"at txn <a href='/tx/(0x[0-9a-fA-F]{64})'"

ADDRESS = "0x5B38Da6a701c568545dCfcB03FcB875f56beddC4"
OTHER_ADDRESS = "0xAb8483F64d9C6d1EcF9b849Ae677dD3315835cb2"

IPFS_MULTIHASH = bytes([0x12, 0x20]) + bytes(range(32))
OTHER_IPFS_MULTIHASH = bytes([0x12, 0x20]) + bytes(range(32, 64))

RUNTIME_CODE = "6080604052348015600f57600080fd5b50"
CREATION_PREFIX = "608060405234801561001057600080fd5b50"

SOURCE_PATH = "contracts/Storage.sol"
SOURCE = "pragma solidity ^0.8.0;\ncontract Storage { uint256 number; }\n"


def with_auxdata(code: str, auxdata: Dict[str, Any]) -> str:
    """Append a Solidity-style CBOR trailer (blob + 2-byte length) to hex code."""
    blob = cbor2.dumps(auxdata)
    return "0x" + code + blob.hex() + len(blob).to_bytes(2, "big").hex()


def rpc_callback(handlers: Dict[str, Callable[[list], Any]]):
    """Build a responses callback answering JSON-RPC by method name."""

    def callback(request):
        body = json.loads(request.body)
        handler = handlers.get(body["method"])
        if handler is None:
            payload = {"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32601, "message": "not found"}}
        else:
            payload = {"jsonrpc": "2.0", "id": body["id"], "result": handler(body["params"])}
        return (200, {}, json.dumps(payload))

    return callback


def add_rpc(url: str, handlers: Dict[str, Callable[[list], Any]]) -> None:
    """Register a JSON-RPC endpoint on the active responses mock."""
    responses.add_callback(
        responses.POST,
        url,
        callback=rpc_callback(handlers),
        content_type="application/json",
    )


@pytest.fixture
def runtime_bytecode() -> str:
    """Compiled runtime bytecode with an IPFS trailer."""
    return with_auxdata(RUNTIME_CODE, {"ipfs": IPFS_MULTIHASH, "solc": b"\x00\x08\x04"})


@pytest.fixture
def creation_bytecode() -> str:
    """Compiled creation bytecode embedding the runtime bytecode."""
    return with_auxdata(
        CREATION_PREFIX + RUNTIME_CODE, {"ipfs": IPFS_MULTIHASH, "solc": b"\x00\x08\x04"}
    )


@pytest.fixture
def chain() -> Chain:
    """Chain with every creation data strategy configured."""
    return Chain(
        chain_id="1",
        name="Ethereum Mainnet",
        rpc=(RPC_URL,),
        archive_rpc=ARCHIVE_URL,
        contract_fetch_address=EXPLORER_URL,
        tx_regex=TX_REGEX,
        graphql_fetch_address=GRAPHQL_URL,
    )


@pytest.fixture
def bare_chain() -> Chain:
    """Chain with no creation data strategy configured."""
    return Chain(chain_id="1", name="Ethereum Mainnet", rpc=(RPC_URL,))


@pytest.fixture
def metadata() -> Dict[str, Any]:
    """Minimal compiler metadata for a single-file contract."""
    return {
        "compiler": {"version": "0.8.4+commit.c7e474f2"},
        "language": "Solidity",
        "output": {"abi": []},
        "settings": {
            "compilationTarget": {SOURCE_PATH: "Storage"},
            "evmVersion": "istanbul",
            "libraries": {},
            "metadata": {"bytecodeHash": "ipfs"},
            "optimizer": {"enabled": False, "runs": 200},
            "remappings": [],
        },
        "sources": {
            SOURCE_PATH: {
                "keccak256": source_hash(SOURCE),
                "urls": ["dweb:/ipfs/QmSourceCid"],
            }
        },
        "version": 1,
    }


@pytest.fixture
def contract(metadata: Dict[str, Any]) -> CheckedContract:
    """Contract with all of its sources present."""
    return CheckedContract(
        name="Storage",
        compiled_path=SOURCE_PATH,
        metadata=metadata,
        metadata_raw=json.dumps(metadata),
        sources={SOURCE_PATH: SOURCE},
    )


@pytest.fixture
def compiled(runtime_bytecode: str, creation_bytecode: str, metadata: Dict[str, Any]) -> CompiledArtifact:
    """Recompilation result matching the fixtures above."""
    return CompiledArtifact(
        runtime_bytecode=runtime_bytecode,
        creation_bytecode=creation_bytecode,
        metadata=json.dumps(metadata),
    )


@pytest.fixture
def repository_dir(tmp_path: Path) -> Path:
    """Create a temporary repository directory for tests."""
    repository = tmp_path / "repository"
    repository.mkdir(parents=True, exist_ok=True)
    return repository
