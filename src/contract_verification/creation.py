"""Creation transaction retrieval for contract-verification library.

The creation data of a contract is the input of the transaction that deployed
it. Three strategies are tried in order, each only when the chain configures
the endpoint it needs:

1. scrape:  block explorer page + regex → creation tx hash → RPC
2. graphql: indexer query → creation tx hash → RPC
3. archive: binary search over block height on an archive node
"""

import re
from typing import Any, Callable, List, Optional, Tuple

import requests

from .constants import DEFAULT_TIMEOUT
from .exceptions import CreationDataNotFoundError, RpcError, StrategyError
from .logging import get_logger
from .rpc import get_block, get_block_number, get_code_at_block, get_transaction, get_transaction_receipt
from .types import Chain

CREATION_TX_QUERY = """
query GetCreationTransaction($address: String!) {
  contract(address: $address) {
    creationTransaction {
      hash
    }
  }
}
"""


def _transaction_input(rpc_url: str, tx_hash: str) -> str:
    """Fetch a transaction and return its input data."""
    tx = get_transaction(rpc_url, tx_hash)
    data = tx.get("input") or tx.get("data")
    if not data or data == "0x":
        raise StrategyError(f"Transaction {tx_hash} has no input data")
    return data.lower()


def creation_data_by_scraping(chain: Chain, address: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """
    Scrape the block explorer for the creation tx hash, then fetch its input.

    Raises:
        StrategyError: If the page cannot be fetched or does not match tx_regex
    """
    url = chain.contract_fetch_address.replace("{address}", address)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise StrategyError(f"Failed to fetch {url}: {e}") from e

    try:
        match = re.search(chain.tx_regex, response.text)
    except re.error as e:
        raise StrategyError(f"Invalid tx_regex for chain {chain.chain_id}: {e}") from e
    if not match:
        raise StrategyError(f"Creation transaction not found on {url}")

    try:
        tx_hash = match.group(1)
    except IndexError:
        raise StrategyError(f"tx_regex for chain {chain.chain_id} has no capture group") from None

    try:
        return _transaction_input(chain.rpc[0], tx_hash)
    except RpcError as e:
        raise StrategyError(str(e)) from e


def creation_data_from_graphql(chain: Chain, address: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """
    Ask a GraphQL indexer for the creation tx hash, then fetch its input.

    Raises:
        StrategyError: If the query fails or returns no transaction
    """
    try:
        response = requests.post(
            chain.graphql_fetch_address,
            json={"query": CREATION_TX_QUERY, "variables": {"address": address}},
            timeout=timeout,
        )
        response.raise_for_status()
        body = response.json()
    except requests.RequestException as e:
        raise StrategyError(f"GraphQL query failed: {e}") from e
    except ValueError as e:
        raise StrategyError(f"Invalid JSON from GraphQL endpoint: {e}") from e

    if not isinstance(body, dict):
        raise StrategyError(f"Unexpected GraphQL response: {body!r}")
    if body.get("errors"):
        raise StrategyError(f"GraphQL errors: {body['errors']}")

    try:
        tx_hash = body["data"]["contract"]["creationTransaction"]["hash"]
    except (KeyError, TypeError):
        raise StrategyError(f"No creation transaction indexed for {address}") from None
    if not tx_hash:
        raise StrategyError(f"No creation transaction indexed for {address}")

    try:
        return _transaction_input(chain.rpc[0], tx_hash)
    except RpcError as e:
        raise StrategyError(str(e)) from e


def find_creation_block(rpc_url: str, address: str) -> int:
    """
    Binary search for the lowest block at which code exists at address.

    Raises:
        RpcError: If any node call fails
        StrategyError: If there is no code at the latest block
    """
    low = 0
    high = get_block_number(rpc_url)
    if get_code_at_block(rpc_url, address, high) == "0x":
        raise StrategyError(f"No code at {address} as of block {high}")

    while low < high:
        mid = (low + high) // 2
        if get_code_at_block(rpc_url, address, mid) == "0x":
            low = mid + 1
        else:
            high = mid

    return low


def creation_data_from_archive(chain: Chain, address: str) -> str:
    """
    Locate the creation block on an archive node and return the creating tx input.

    Only contracts created directly by a transaction can be found this way.

    Raises:
        StrategyError: If the creating transaction cannot be identified
    """
    rpc_url = chain.archive_rpc
    try:
        block_number = find_creation_block(rpc_url, address)
        block = get_block(rpc_url, block_number, full_transactions=True)

        for tx in block.get("transactions", []):
            if not isinstance(tx, dict):
                raise StrategyError(f"Block {block_number} was returned without transaction objects")
            if tx.get("to") is not None:
                continue
            receipt = get_transaction_receipt(rpc_url, tx["hash"])
            created = (receipt or {}).get("contractAddress")
            if created and created.lower() == address.lower():
                data = tx.get("input") or tx.get("data")
                if not data:
                    raise StrategyError(f"Creation transaction {tx['hash']} has no input data")
                return data.lower()
    except RpcError as e:
        raise StrategyError(str(e)) from e

    raise StrategyError(f"No creation transaction for {address} in block {block_number}")


def _configured_strategies(chain: Chain) -> List[Tuple[str, Callable[[Chain, str], str]]]:
    strategies: List[Tuple[str, Callable[[Chain, str], str]]] = []
    if chain.contract_fetch_address and chain.tx_regex:
        strategies.append(("scrape", creation_data_by_scraping))
    if chain.graphql_fetch_address:
        strategies.append(("graphql", creation_data_from_graphql))
    if chain.archive_rpc:
        strategies.append(("archive", creation_data_from_archive))
    return strategies


def resolve_creation_data(chain: Chain, address: str, log: Optional[Any] = None) -> str:
    """
    Return the input of the transaction that created the contract at address.

    Strategies are tried once each in priority order; a failing strategy is
    logged as a warning and the next one is tried.

    Args:
        chain: Chain configuration
        address: Contract address
        log: Logger (defaults to the module logger)

    Returns:
        Lowercase 0x-prefixed creation data

    Raises:
        CreationDataNotFoundError: If no strategy is configured or all failed
    """
    if log is None:
        log = get_logger(__name__)
    loc = "[GET_CREATION_DATA]"

    for name, strategy in _configured_strategies(chain):
        log.info("Fetching creation data", loc=loc, chain=chain.chain_id, address=address, strategy=name)
        try:
            return strategy(chain, address)
        except Exception as e:
            log.warning(
                "Creation data strategy failed",
                loc=loc,
                chain=chain.chain_id,
                address=address,
                strategy=name,
                err=str(e),
            )

    err = "Cannot fetch creation data"
    log.error(err, loc=loc, chain=chain.chain_id, address=address)
    raise CreationDataNotFoundError(f"{err} for {address} on chain {chain.chain_id}")
