"""JSON-RPC access to chain nodes for contract-verification library."""

import itertools
from typing import Any, Dict, List, Optional, Union

import requests
from eth_utils import to_checksum_address

from .constants import DEFAULT_TIMEOUT
from .exceptions import RpcError

_request_ids = itertools.count(1)

BlockTag = Union[int, str]


def rpc_call(url: str, method: str, params: List[Any], timeout: float = DEFAULT_TIMEOUT) -> Any:
    """
    Perform a JSON-RPC 2.0 call.

    Args:
        url: RPC endpoint URL
        method: JSON-RPC method name (e.g. "eth_getCode")
        params: Positional parameters
        timeout: Seconds before the call is abandoned

    Returns:
        The "result" member of the response

    Raises:
        RpcError: On HTTP errors, RPC errors, timeouts or connection failures
    """
    try:
        response = requests.post(
            url,
            json={
                "jsonrpc": "2.0",
                "method": method,
                "params": params,
                "id": next(_request_ids),
            },
            timeout=timeout,
        )

        # Check for HTTP errors
        if response.status_code != 200:
            raise RpcError(f"RPC request {method} failed with status {response.status_code}")

        body = response.json()

    except requests.RequestException as e:
        raise RpcError(f"Network error during RPC call {method}: {e}") from e
    except ValueError as e:
        raise RpcError(f"Invalid JSON in RPC response to {method}: {e}") from e

    # Check for RPC errors
    if "error" in body:
        raise RpcError(f"RPC error in {method}: {body['error']}")
    if "result" not in body:
        raise RpcError(f"RPC response to {method} has no result")

    return body["result"]


def _block_param(block: BlockTag) -> str:
    return hex(block) if isinstance(block, int) else block


def get_bytecode(rpc_url: str, address: str) -> str:
    """
    Get the runtime bytecode currently stored at an address.

    Returns:
        Lowercase 0x-prefixed hex string, "0x" if nothing is deployed
    """
    return get_code_at_block(rpc_url, address, "latest")


def get_code_at_block(rpc_url: str, address: str, block: BlockTag) -> str:
    """Get the bytecode stored at an address as of a given block."""
    code = rpc_call(rpc_url, "eth_getCode", [address, _block_param(block)])
    if not code:
        return "0x"
    return code.lower()


def get_block_number(rpc_url: str) -> int:
    """Get the height of the latest block."""
    return int(rpc_call(rpc_url, "eth_blockNumber", []), 16)


def get_block(rpc_url: str, block: BlockTag, full_transactions: bool = False) -> Dict[str, Any]:
    """
    Get a block by number.

    Raises:
        RpcError: If the call fails or the block is unknown
    """
    result = rpc_call(rpc_url, "eth_getBlockByNumber", [_block_param(block), full_transactions])
    if result is None:
        raise RpcError(f"Block {block} not found")
    return result


def get_transaction(rpc_url: str, tx_hash: str) -> Dict[str, Any]:
    """Get a transaction by hash, raising RpcError when unknown."""
    result = rpc_call(rpc_url, "eth_getTransactionByHash", [tx_hash])
    if result is None:
        raise RpcError(f"Transaction {tx_hash} not found")
    return result


def get_transaction_receipt(rpc_url: str, tx_hash: str) -> Optional[Dict[str, Any]]:
    """Get a transaction receipt by hash (None if pending or unknown)."""
    return rpc_call(rpc_url, "eth_getTransactionReceipt", [tx_hash])


def check_endpoint(rpc_url: str, timeout: float = DEFAULT_TIMEOUT) -> bool:
    """
    Probe an endpoint with eth_blockNumber.

    Returns:
        True if the endpoint answered, False otherwise
    """
    try:
        rpc_call(rpc_url, "eth_blockNumber", [], timeout=timeout)
    except RpcError:
        return False
    return True


def checksum_address(address: str) -> str:
    """Normalize an address to its EIP-55 checksummed form."""
    return to_checksum_address(address)
