"""Chain registry for contract-verification library."""

from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional

from .constants import CHAIN_CONFIG, MODE_FULLNODE, MODE_PROVIDER
from .exceptions import ChainNotFoundError
from .logging import get_logger
from .rpc import check_endpoint
from .types import Chain


def _chain_from_config(chain_id: str, config: Dict[str, Any], rpc: List[str]) -> Chain:
    return Chain(
        chain_id=chain_id,
        name=config["name"],
        rpc=tuple(rpc),
        archive_rpc=config.get("archive_rpc"),
        contract_fetch_address=config.get("contract_fetch_address"),
        tx_regex=config.get("tx_regex"),
        graphql_fetch_address=config.get("graphql_fetch_address"),
    )


def load_chains(
    mode: str,
    provider_id: Optional[str] = None,
    chain_config: Optional[Dict[str, Dict[str, Any]]] = None,
) -> List[Chain]:
    """
    Build chain configurations from the chain table.

    Args:
        mode: "provider" for every chain reachable through the remote provider,
              "fullnode" for chains served by a self-hosted node
        provider_id: Interpolated into provider RPC templates
        chain_config: Chain table (defaults to the built-in CHAIN_CONFIG)

    Returns:
        List of Chain objects in table order

    Raises:
        ValueError: If mode is unknown
    """
    if chain_config is None:
        chain_config = CHAIN_CONFIG

    chains: List[Chain] = []
    for chain_id, config in chain_config.items():
        if mode == MODE_PROVIDER:
            rpc = [url.replace("{provider_id}", provider_id or "") for url in config["rpc"]]
        elif mode == MODE_FULLNODE:
            if not config.get("fullnode"):
                continue
            rpc = [config["fullnode"]]
        else:
            raise ValueError(f"Unknown chain registry mode: {mode}")

        chains.append(_chain_from_config(chain_id, config, rpc))

    return chains


class ChainRegistry(Mapping[str, Chain]):
    """Read-only lookup table of chains keyed by chain id."""

    def __init__(self, chains: List[Chain]):
        self._chains = MappingProxyType({chain.chain_id: chain for chain in chains})

    def __getitem__(self, chain_id: str) -> Chain:
        return self._chains[chain_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._chains)

    def __len__(self) -> int:
        return len(self._chains)

    def get_chain(self, chain_id: str) -> Chain:
        """
        Look up a chain by id.

        Raises:
            ChainNotFoundError: If chain is not in the registry
        """
        try:
            return self._chains[chain_id]
        except KeyError:
            raise ChainNotFoundError(f"Chain '{chain_id}' is not supported") from None

    @classmethod
    def from_config(
        cls,
        provider_id: Optional[str] = None,
        offline: bool = False,
        log: Optional[Any] = None,
        check_endpoints: bool = True,
        chain_config: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> "ChainRegistry":
        """
        Build the registry once at startup.

        With a provider id every supported chain is loaded through the provider,
        otherwise only chains with a self-hosted node. Unreachable endpoints are
        logged, never fatal.

        Args:
            provider_id: Remote provider project id
            offline: Skip loading chains entirely
            log: Logger (defaults to the module logger)
            check_endpoints: Probe endpoints before returning
            chain_config: Chain table (defaults to the built-in CHAIN_CONFIG)
        """
        if log is None:
            log = get_logger(__name__)
        if offline:
            return cls([])

        loc = "[INIT_CHAINS]"
        if provider_id:
            chains = load_chains(MODE_PROVIDER, provider_id, chain_config)
            if check_endpoints and chains:
                log.info("started checking providerPID", loc=loc)
                if not check_endpoint(chains[0].rpc[0]):
                    log.warning("Provider endpoint unreachable", loc=loc, chain=chains[0].chain_id)
                log.info("finished checking providerPID", loc=loc)
        else:
            chains = load_chains(MODE_FULLNODE, chain_config=chain_config)
            if check_endpoints:
                for chain in chains:
                    if not check_endpoint(chain.rpc[0]):
                        log.warning(
                            f"Invalid endpoint for chain {chain.name}",
                            loc=loc,
                            endpoint=chain.rpc[0],
                        )

        registry = cls(chains)
        log.info("Finished loading chains", loc=loc, numberOfChains=len(registry))
        return registry
