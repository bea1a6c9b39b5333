"""Data types and dataclasses for selora-deployments library."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .constants import DEFAULT_SWAP_EXECUTOR_FEE


@dataclass(frozen=True)
class NetworkIdentity:
    """A network name resolved to its chain id."""

    name: str  # e.g., "sepolia"
    chain_id: int  # e.g., 11155111


@dataclass(frozen=True)
class DeploymentConstants:
    """Constructor arguments for one network, read from the constants table."""

    selora_v2_router: str  # SeloraV2Router constructor argument
    selora_v3_router: str  # SeloraV3Router first constructor argument
    selora_v3_factory: str  # SeloraV3Router second constructor argument
    team: str  # Team/treasury address for the SwapExecutor
    weth: str  # Wrapped native token address
    trusted_tokens: List[str] = field(default_factory=list)
    swap_executor_fee: int = DEFAULT_SWAP_EXECUTOR_FEE


@dataclass
class DeploymentState:
    """Persisted record of the deployed addresses for one chain."""

    routers: List[str]  # Currently active router generation, in deployment order
    swap_executor: str  # Set once by the core deployment, never changes

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the on-disk field names."""
        return {"routers": list(self.routers), "swapExecutor": self.swap_executor}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeploymentState":
        """
        Build a state record from its on-disk representation.

        Raises:
            KeyError: If a required field is missing
            TypeError: If routers is not a list of strings or swapExecutor is not a string
        """
        routers = data["routers"]
        if not isinstance(routers, list):
            raise TypeError(f"routers must be a list, got {type(routers).__name__}")
        for router in routers:
            if not isinstance(router, str):
                raise TypeError(f"router entries must be strings, got {router!r}")

        swap_executor = data["swapExecutor"]
        if not isinstance(swap_executor, str):
            raise TypeError(f"swapExecutor must be a string, got {swap_executor!r}")
        return cls(routers=list(routers), swap_executor=swap_executor)


@dataclass
class ContractArtifact:
    """Compiled contract loaded from a hardhat artifact file."""

    name: str
    abi: List[Dict[str, Any]]
    bytecode: str  # 0x-prefixed, may contain unlinked library placeholders
    link_references: Dict[str, Dict[str, List[Dict[str, int]]]] = field(default_factory=dict)
    source_name: Optional[str] = None
    path: Optional[Path] = None  # Artifact file the interface was read from
