"""Core deployment and router reconciliation flows for selora-deployments library."""

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .config import ConstantsTable
from .constants import SELORA_V2_ROUTER, SELORA_V3_ROUTER, SWAP_EXECUTOR
from .contracts import deploy_contract, get_contract_at_address
from .ledger import ContractHandle, Ledger
from .paths import get_state_path
from .state import load_state, save_state
from .types import DeploymentConstants, DeploymentState, NetworkIdentity

logger = logging.getLogger(__name__)

MAX_TOGGLE_WORKERS = 8


def resolve_network_identity(ledger: Ledger, network: str) -> NetworkIdentity:
    """Resolve a network name to its chain id through the ledger."""
    identity = NetworkIdentity(name=network, chain_id=ledger.chain_id(network))
    logger.info("Network %s has chain id %d", identity.name, identity.chain_id)
    return identity


def deploy_routers(ledger: Ledger, network: str, constants: DeploymentConstants) -> List[str]:
    """
    Deploy one generation of routers.

    Args:
        ledger: Chain access
        network: Network name
        constants: Constructor arguments for the network

    Returns:
        Router addresses in deployment order (V2 router first, then V3 router)
    """
    routers: List[str] = []

    selora_v2 = deploy_contract(
        ledger, network, SELORA_V2_ROUTER, None, constants.selora_v2_router
    )
    routers.append(selora_v2.address)

    selora_v3 = deploy_contract(
        ledger,
        network,
        SELORA_V3_ROUTER,
        None,
        constants.selora_v3_router,
        constants.selora_v3_factory,
    )
    routers.append(selora_v3.address)

    return routers


def deactivate_routers(executor: ContractHandle, routers: Sequence[str]) -> None:
    """
    Toggle the active flag of every router on the executor.

    Calls are issued concurrently. Returns once all of them are mined; if any
    call fails, calls not yet started are cancelled and the first failure
    (in router order) is raised after the running ones settle.

    Args:
        executor: SwapExecutor handle
        routers: Router addresses to toggle

    Raises:
        DeploymentError: The first failing call's error
    """
    if not routers:
        return

    workers = min(len(routers), MAX_TOGGLE_WORKERS)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="router-toggle") as pool:
        futures = [
            pool.submit(executor.transact, "switchRouterActiveStatus", router)
            for router in routers
        ]
        _, pending = wait(futures, return_when=FIRST_EXCEPTION)
        for future in pending:
            future.cancel()

    failures = [
        (router, future.exception())
        for router, future in zip(routers, futures)
        if not future.cancelled() and future.exception() is not None
    ]
    if failures:
        toggled = [
            router
            for router, future in zip(routers, futures)
            if not future.cancelled() and future.exception() is None
        ]
        logger.error(
            "Router toggle failed for %s; registry is partially updated (toggled: %s)",
            ", ".join(router for router, _ in failures),
            toggled,
        )
        raise failures[0][1]

    logger.info("Toggled %d prior router(s)", len(routers))


def deploy_core(
    network: str,
    ledger: Ledger,
    constants_table: ConstantsTable,
    output_dir: Optional[Union[Path, str]] = None,
) -> DeploymentState:
    """
    Deploy both routers and the SwapExecutor, then record their addresses.

    Already deployed contracts are not rolled back if a later step fails; a
    rerun deploys fresh instances.

    Args:
        network: Network name
        ledger: Chain access
        constants_table: Per-network constructor arguments
        output_dir: Directory for the state record (defaults to get_default_output_dir())

    Returns:
        The persisted DeploymentState

    Raises:
        ConfigMissingError: If the network is absent from the constants table
        ChainRejectedError: If any deployment is rejected
        StateWriteError: If the state record could not be written
    """
    constants = constants_table.for_network(network)

    routers = deploy_routers(ledger, network, constants)

    swap_executor = deploy_contract(
        ledger,
        network,
        SWAP_EXECUTOR,
        None,
        constants.team,
        list(routers),
        constants.swap_executor_fee,
        constants.weth,
        list(constants.trusted_tokens),
    )

    state = DeploymentState(routers=routers, swap_executor=swap_executor.address)
    identity = resolve_network_identity(ledger, network)
    save_state(get_state_path(identity.chain_id, output_dir), state)
    return state


def deploy_integrations(
    network: str,
    ledger: Ledger,
    constants_table: ConstantsTable,
    output_dir: Optional[Union[Path, str]] = None,
) -> DeploymentState:
    """
    Deploy a new router generation and swap it in on the existing SwapExecutor.

    Steps, in order: deploy routers, load the prior state record, set trusted
    tokens, toggle every prior router, add the new routers, persist. The
    record is only rewritten after every executor call has succeeded.

    Args:
        network: Network name
        ledger: Chain access
        constants_table: Per-network constructor arguments
        output_dir: Directory for the state record (defaults to get_default_output_dir())

    Returns:
        The persisted DeploymentState (new routers, unchanged executor)

    Raises:
        ConfigMissingError: If the network is absent from the constants table
        StateMissingError: If the core deployment has not been recorded for this chain
        ChainRejectedError: If a deployment or executor call is rejected
        LocatorMismatchError: If the recorded executor address is not a SwapExecutor
        StateWriteError: If the state record could not be written
    """
    constants = constants_table.for_network(network)

    routers = deploy_routers(ledger, network, constants)

    identity = resolve_network_identity(ledger, network)
    state_path = get_state_path(identity.chain_id, output_dir)
    prior = load_state(state_path)

    swap_executor = get_contract_at_address(ledger, network, SWAP_EXECUTOR, prior.swap_executor)
    try:
        swap_executor.transact("setTrustedTokens", list(constants.trusted_tokens))
        deactivate_routers(swap_executor, prior.routers)
        swap_executor.transact("addRouters", list(routers))
    except Exception:
        logger.error(
            "Reconciling SwapExecutor at %s failed; new routers %s are deployed but not recorded",
            prior.swap_executor,
            routers,
        )
        raise

    state = DeploymentState(routers=routers, swap_executor=prior.swap_executor)
    save_state(state_path, state)
    return state
