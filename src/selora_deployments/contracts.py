"""Contract deployment and lookup for selora-deployments library."""

import logging
from typing import Any, Mapping, Optional

from .ledger import ContractHandle, Ledger

logger = logging.getLogger(__name__)


def deploy_contract(
    ledger: Ledger,
    network: str,
    contract_name: str,
    libraries: Optional[Mapping[str, str]] = None,
    *args: Any,
) -> ContractHandle:
    """
    Deploy a contract and wait until it is live.

    Args:
        ledger: Chain access
        network: Network name, must have a configured RPC endpoint
        contract_name: Contract identifier, must match a compiled artifact
        libraries: Optional library name -> address mapping for linking
        *args: Constructor arguments, passed through unchanged

    Returns:
        Handle to the deployed contract

    Raises:
        NetworkNotFoundError: If the network is not configured
        UnknownContractError: If the contract identifier is unknown
        ChainRejectedError: If the deployment transaction is rejected or reverts

    Failures are not retried.
    """
    logger.info("Deploying %s on %s", contract_name, network)
    handle = ledger.deploy(network, contract_name, libraries, *args)
    logger.info("Deployed %s at %s", contract_name, handle.address)
    return handle


def get_contract_at_address(
    ledger: Ledger, network: str, contract_name: str, address: str
) -> ContractHandle:
    """
    Attach to an already deployed contract without sending a transaction.

    The address is not checked here; a missing contract or wrong ABI
    surfaces on the first call made through the handle.

    Args:
        ledger: Chain access
        network: Network name
        contract_name: Contract identifier whose ABI to bind
        address: Deployed contract address

    Returns:
        Handle bound to the address
    """
    logger.debug("Attaching to %s at %s on %s", contract_name, address, network)
    return ledger.attach(network, contract_name, address)
