"""Recompilation of verified sources for contract-verification library."""

import json
import os
import subprocess
from typing import Any, Dict, Optional

from .exceptions import CompilationError
from .logging import get_logger
from .sources import source_hash
from .types import CompiledArtifact

OUTPUT_SELECTION = ["evm.bytecode.object", "evm.deployedBytecode.object", "metadata"]


def _standard_json_libraries(libraries: Dict[str, str]) -> Dict[str, Dict[str, str]]:
    """Convert metadata libraries ("file:Name" -> address) to standard-JSON form."""
    result: Dict[str, Dict[str, str]] = {}
    for qualified_name, address in libraries.items():
        file_name, _, lib_name = qualified_name.rpartition(":")
        result.setdefault(file_name, {})[lib_name] = address
    return result


def build_standard_json_input(metadata: Dict[str, Any], sources: Dict[str, str]) -> Dict[str, Any]:
    """
    Build a solc standard-JSON input reproducing the metadata's compilation.

    Args:
        metadata: Parsed metadata document
        sources: Source path -> content, one entry per metadata source

    Returns:
        Standard-JSON input dictionary

    Raises:
        CompilationError: If a source is absent or its keccak256 differs from the metadata
    """
    input_sources: Dict[str, Dict[str, str]] = {}
    for path, spec in metadata.get("sources", {}).items():
        if path not in sources:
            raise CompilationError(f"Missing source: {path}")
        content = sources[path]
        expected = spec.get("keccak256")
        if expected and source_hash(content) != expected.lower():
            raise CompilationError(f"Source hash mismatch for {path}")
        input_sources[path] = {"content": content}

    settings = {k: v for k, v in metadata.get("settings", {}).items() if k != "compilationTarget"}
    if "libraries" in settings:
        settings["libraries"] = _standard_json_libraries(settings["libraries"])
    settings["outputSelection"] = {"*": {"*": OUTPUT_SELECTION}}

    return {
        "language": metadata.get("language", "Solidity"),
        "sources": input_sources,
        "settings": settings,
    }


def _run_solc(solc_path: str, standard_input: Dict[str, Any]) -> Dict[str, Any]:
    try:
        result = subprocess.run(
            [solc_path, "--standard-json"],
            input=json.dumps(standard_input),
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise CompilationError(f"Compiler not found: {solc_path}") from e
    except subprocess.CalledProcessError as e:
        raise CompilationError(f"Compiler failed: {e.stderr}") from e

    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise CompilationError(f"Compiler produced invalid JSON: {e}") from e


def recompile(
    metadata: Dict[str, Any],
    sources: Dict[str, str],
    log: Optional[Any] = None,
    solc_path: Optional[str] = None,
) -> CompiledArtifact:
    """
    Recompile sources with the settings recorded in their metadata.

    Args:
        metadata: Parsed metadata document
        sources: Source path -> content
        log: Logger (defaults to the module logger)
        solc_path: Compiler binary (defaults to $SOLC_PATH, then "solc")

    Returns:
        CompiledArtifact of the compilation target

    Raises:
        CompilationError: If compilation fails or the target is missing from the output
    """
    if log is None:
        log = get_logger(__name__)
    if solc_path is None:
        solc_path = os.environ.get("SOLC_PATH", "solc")

    target = metadata.get("settings", {}).get("compilationTarget", {})
    if len(target) != 1:
        raise CompilationError("Metadata must declare exactly one compilation target")
    file_path, contract_name = next(iter(target.items()))

    version = metadata.get("compiler", {}).get("version")
    log.info("Recompiling", loc="[RECOMPILE]", target=f"{file_path}:{contract_name}", version=version)

    output = _run_solc(solc_path, build_standard_json_input(metadata, sources))

    errors = [e for e in output.get("errors", []) if e.get("severity") == "error"]
    if errors:
        raise CompilationError(
            "; ".join(e.get("formattedMessage") or e.get("message", "") for e in errors)
        )

    try:
        contract = output["contracts"][file_path][contract_name]
    except KeyError:
        raise CompilationError(f"Compiler output has no {file_path}:{contract_name}") from None

    return CompiledArtifact(
        runtime_bytecode="0x" + contract["evm"]["deployedBytecode"]["object"].lower(),
        creation_bytecode="0x" + contract["evm"]["bytecode"]["object"].lower(),
        metadata=contract["metadata"],
    )
