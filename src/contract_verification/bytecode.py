"""Auxiliary-data trailer handling for contract-verification library.

Solidity appends a CBOR-encoded map (``ipfs``/``bzzr0``/``bzzr1``/``solc``/...)
to runtime and creation bytecode, followed by the map's length as two
big-endian bytes.
"""

from typing import Any, Dict, Optional

import cbor2


def normalize_hex(value: Optional[str]) -> Optional[str]:
    """Return value as lowercase 0x-prefixed hex (None stays None)."""
    if value is None:
        return None
    value = value.strip().lower()
    if not value.startswith("0x"):
        value = "0x" + value
    return value


def _trailer_bounds(bytecode: str) -> Optional[tuple[int, int]]:
    """Return (start, end) hex offsets of the CBOR blob, or None if no room for one."""
    code = bytecode[2:] if bytecode.startswith("0x") else bytecode
    if len(code) < 4:
        return None
    try:
        length = int(code[-4:], 16)
    except ValueError:
        return None

    end = len(code) - 4
    start = end - 2 * length
    if length == 0 or start < 0:
        return None
    return start, end


def decode_auxdata(bytecode: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Decode the auxiliary-data trailer of a bytecode.

    Args:
        bytecode: Hex bytecode, with or without 0x prefix

    Returns:
        Decoded CBOR map, or None if the trailer is absent or malformed
    """
    if not bytecode:
        return None

    bounds = _trailer_bounds(bytecode)
    if bounds is None:
        return None

    code = bytecode[2:] if bytecode.startswith("0x") else bytecode
    start, end = bounds
    try:
        decoded = cbor2.loads(bytes.fromhex(code[start:end]))
    except (ValueError, cbor2.CBORDecodeError):
        return None

    if not isinstance(decoded, dict):
        return None
    return decoded


def trim_metadata(bytecode: str) -> str:
    """
    Strip the auxiliary-data trailer (blob plus its 2-byte length).

    Bytecode without a decodable trailer is returned unchanged.
    """
    if decode_auxdata(bytecode) is None:
        return bytecode

    start, _ = _trailer_bounds(bytecode)
    prefix = "0x" if bytecode.startswith("0x") else ""
    return prefix + bytecode[len(prefix) :][:start]
