"""
selora-deployments: deployment and reconciliation of Selora router and SwapExecutor contracts
"""

from importlib.metadata import PackageNotFoundError, version

from .config import ConstantsTable
from .contracts import deploy_contract, get_contract_at_address
from .exceptions import (
    ChainRejectedError,
    ConfigMissingError,
    DeploymentError,
    LocatorMismatchError,
    NetworkNotFoundError,
    RpcError,
    StateFormatError,
    StateMissingError,
    StateWriteError,
    UnknownContractError,
)
from .flows import deploy_core, deploy_integrations
from .ledger import ContractHandle, Ledger, Web3Ledger
from .state import load_state, save_state
from .types import DeploymentConstants, DeploymentState, NetworkIdentity

try:
    __version__ = version("selora-deployments")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "deploy_core",
    "deploy_integrations",
    "deploy_contract",
    "get_contract_at_address",
    "load_state",
    "save_state",
    "ConstantsTable",
    "ContractHandle",
    "Ledger",
    "Web3Ledger",
    "DeploymentConstants",
    "DeploymentState",
    "NetworkIdentity",
    "DeploymentError",
    "ConfigMissingError",
    "NetworkNotFoundError",
    "UnknownContractError",
    "StateMissingError",
    "StateFormatError",
    "StateWriteError",
    "ChainRejectedError",
    "LocatorMismatchError",
    "RpcError",
]
