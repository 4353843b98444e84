"""Configuration constants for contract-verification library."""

# Timeout (seconds) applied to every outbound network call
DEFAULT_TIMEOUT = 30

# Default gateways used to fetch missing sources referenced by metadata
DEFAULT_IPFS_GATEWAY = "https://ipfs.io/ipfs/"
DEFAULT_SWARM_GATEWAY = "https://swarm-gateways.net/bzz-raw:/"

# Repository file names
METADATA_FILE_NAME = "metadata.json"
CONSTRUCTOR_ARGS_FILE_NAME = "constructor-args.txt"

# Diagnostics attached to single-candidate failures
MSG_CHAIN_UNAVAILABLE = "{chain_name} is temporarily unavailable."
MSG_NO_CONTRACT = "{chain_name} does not have a contract deployed at {address}."
MSG_BYTECODE_MISMATCH = "The deployed and recompiled bytecode don't match."
MSG_COMPARISON_FAILED = (
    "There were problems during contract verification. Please try again in a minute."
)
MSG_NO_MATCH_FALLBACK = "Could not match the deployed and recompiled bytecode."

# Chain registry modes
MODE_PROVIDER = "provider"
MODE_FULLNODE = "fullnode"

# Built-in chain table keyed by chain id (string, as submitted by clients).
#   rpc:                    provider-backed endpoints, "{provider_id}" is interpolated
#   fullnode:               self-hosted node endpoint (fullnode mode only)
#   archive_rpc:            archive-capable endpoint for historical state
#   contract_fetch_address: block explorer page, "{address}" is interpolated
#   tx_regex:               pattern whose first group is the creation tx hash
#   graphql_fetch_address:  GraphQL indexer endpoint
CHAIN_CONFIG = {
    "1": {
        "name": "Ethereum Mainnet",
        "rpc": ["https://eth-mainnet.alchemyapi.io/v2/{provider_id}"],
        "fullnode": "http://geth.dappnode:8545",
        "archive_rpc": None,
        "contract_fetch_address": "https://etherscan.io/address/{address}",
        "tx_regex": r"at txn <a href='/tx/(0x[0-9a-fA-F]{64})'",
        "graphql_fetch_address": None,
    },
    "3": {
        "name": "Ropsten",
        "rpc": ["https://eth-ropsten.alchemyapi.io/v2/{provider_id}"],
        "fullnode": "http://ropsten.dappnode:8545",
        "archive_rpc": None,
        "contract_fetch_address": "https://ropsten.etherscan.io/address/{address}",
        "tx_regex": r"at txn <a href='/tx/(0x[0-9a-fA-F]{64})'",
        "graphql_fetch_address": None,
    },
    "4": {
        "name": "Rinkeby",
        "rpc": ["https://eth-rinkeby.alchemyapi.io/v2/{provider_id}"],
        "fullnode": "http://rinkeby.dappnode:8545",
        "archive_rpc": None,
        "contract_fetch_address": "https://rinkeby.etherscan.io/address/{address}",
        "tx_regex": r"at txn <a href='/tx/(0x[0-9a-fA-F]{64})'",
        "graphql_fetch_address": None,
    },
    "5": {
        "name": "Görli",
        "rpc": ["https://eth-goerli.alchemyapi.io/v2/{provider_id}"],
        "fullnode": "http://goerli-geth.dappnode:8545",
        "archive_rpc": None,
        "contract_fetch_address": "https://goerli.etherscan.io/address/{address}",
        "tx_regex": r"at txn <a href='/tx/(0x[0-9a-fA-F]{64})'",
        "graphql_fetch_address": None,
    },
    "42": {
        "name": "Kovan",
        "rpc": ["https://eth-kovan.alchemyapi.io/v2/{provider_id}"],
        "fullnode": None,
        "archive_rpc": None,
        "contract_fetch_address": "https://kovan.etherscan.io/address/{address}",
        "tx_regex": r"at txn <a href='/tx/(0x[0-9a-fA-F]{64})'",
        "graphql_fetch_address": None,
    },
    "77": {
        "name": "Sokol",
        "rpc": ["https://sokol.poa.network"],
        "fullnode": None,
        "archive_rpc": "https://sokol-archive.blockscout.com",
        "contract_fetch_address": "https://blockscout.com/poa/sokol/address/{address}/transactions",
        "tx_regex": r"at txn.*href.*/tx/(0x[0-9a-fA-F]{64})",
        "graphql_fetch_address": None,
    },
    "100": {
        "name": "xDai Chain",
        "rpc": ["https://rpc.xdaichain.com"],
        "fullnode": None,
        "archive_rpc": "https://xdai-archive.blockscout.com",
        "contract_fetch_address": "https://blockscout.com/poa/xdai/address/{address}/transactions",
        "tx_regex": r"at txn.*href.*/tx/(0x[0-9a-fA-F]{64})",
        "graphql_fetch_address": None,
    },
    "137": {
        "name": "Polygon Mainnet",
        "rpc": ["https://polygon-mainnet.g.alchemy.com/v2/{provider_id}"],
        "fullnode": None,
        "archive_rpc": None,
        "contract_fetch_address": "https://polygonscan.com/address/{address}",
        "tx_regex": r"at txn <a href='/tx/(0x[0-9a-fA-F]{64})'",
        "graphql_fetch_address": "https://api.thegraph.com/subgraphs/name/contract-creations/polygon",
    },
}
