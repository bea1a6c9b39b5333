"""Per-network configuration for selora-deployments library."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .constants import DEFAULT_SWAP_EXECUTOR_FEE, NETWORK_CONFIG, PRIVATE_KEY_ENV
from .exceptions import ConfigMissingError, NetworkNotFoundError
from .paths import get_default_constants_path
from .types import DeploymentConstants

logger = logging.getLogger(__name__)

# JSON field name -> DeploymentConstants attribute
_REQUIRED_FIELDS = {
    "seloraV2Router": "selora_v2_router",
    "seloraV3Router": "selora_v3_router",
    "seloraV3Factory": "selora_v3_factory",
    "team": "team",
    "weth": "weth",
    "trustedTokens": "trusted_tokens",
}


def parse_network_constants(network: str, data: Mapping[str, Any]) -> DeploymentConstants:
    """
    Convert one network entry of the constants table to DeploymentConstants.

    Args:
        network: Network name (used in error messages)
        data: Raw entry, e.g. {"seloraV2Router": "0x...", "trustedTokens": [...], ...}

    Returns:
        DeploymentConstants for the network

    Raises:
        ConfigMissingError: If a required field is absent
    """
    missing = [key for key in _REQUIRED_FIELDS if key not in data]
    if missing:
        raise ConfigMissingError(
            f"Constants for network '{network}' are missing: {', '.join(missing)}"
        )

    kwargs: Dict[str, Any] = {attr: data[key] for key, attr in _REQUIRED_FIELDS.items()}
    kwargs["trusted_tokens"] = list(kwargs["trusted_tokens"])
    kwargs["swap_executor_fee"] = int(data.get("swapExecutorFee", DEFAULT_SWAP_EXECUTOR_FEE))
    return DeploymentConstants(**kwargs)


class ConstantsTable:
    """Read-only, network-indexed table of constructor arguments."""

    def __init__(self, entries: Mapping[str, Mapping[str, Any]]):
        self._entries = dict(entries)

    @classmethod
    def from_file(cls, path: Optional[Union[Path, str]] = None) -> "ConstantsTable":
        """
        Load the constants table from a JSON file.

        Args:
            path: Path to constants JSON (defaults to get_default_constants_path())

        Raises:
            ConfigMissingError: If the file does not exist
        """
        constants_path = Path(path) if path is not None else get_default_constants_path()
        if not constants_path.exists():
            raise ConfigMissingError(f"Constants table not found at {constants_path}")

        with open(constants_path, encoding="utf-8") as f:
            entries = json.load(f)

        logger.debug("Loaded constants for %s from %s", sorted(entries), constants_path)
        return cls(entries)

    def networks(self) -> List[str]:
        """Network names present in the table."""
        return sorted(self._entries)

    def has_network(self, network: str) -> bool:
        return network in self._entries

    def for_network(self, network: str) -> DeploymentConstants:
        """
        Resolve constructor arguments for a network.

        Raises:
            ConfigMissingError: If the network is absent or an entry field is missing
        """
        if not self.has_network(network):
            raise ConfigMissingError(f"Network '{network}' not found in constants table")
        return parse_network_constants(network, self._entries[network])


@dataclass(frozen=True)
class NetworkSettings:
    """Connection settings for one network, read from the environment."""

    name: str
    rpc_url: str
    private_key: Optional[str] = None


def rpc_env_name(network: str) -> str:
    """
    Get the environment variable holding a network's RPC URL.

    Known networks use their NETWORK_CONFIG entry; others map
    "foo-bar" to FOO_BAR_RPC_URL.
    """
    if network in NETWORK_CONFIG:
        return NETWORK_CONFIG[network]["default_rpc_env"]
    return network.upper().replace("-", "_").replace(":", "_") + "_RPC_URL"


def resolve_network_settings(
    network: str, environ: Optional[Mapping[str, str]] = None
) -> NetworkSettings:
    """
    Resolve RPC endpoint and signer key for a network.

    Args:
        network: Network name
        environ: Environment mapping (defaults to os.environ)

    Returns:
        NetworkSettings for the network

    Raises:
        NetworkNotFoundError: If no RPC URL is configured for the network
    """
    if environ is None:
        environ = os.environ

    rpc_url = environ.get(rpc_env_name(network))
    if not rpc_url:
        rpc_url = NETWORK_CONFIG.get(network, {}).get("default_rpc_url")
    if not rpc_url:
        raise NetworkNotFoundError(
            f"No RPC URL configured for network '{network}': set ${rpc_env_name(network)}"
        )

    return NetworkSettings(
        name=network,
        rpc_url=rpc_url,
        private_key=environ.get(PRIVATE_KEY_ENV) or None,
    )
