"""Shared pytest fixtures for selora-deployments tests."""

import json
import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytest

from selora_deployments.config import ConstantsTable
from selora_deployments.exceptions import NetworkNotFoundError

ANY_ARG = object()

TESTNET_CHAIN_ID = 11155111


class FakeContractHandle:
    """In-memory ContractHandle that records every call on its ledger."""

    def __init__(self, ledger: "FakeLedger", network: str, contract_name: str, address: str):
        self._ledger = ledger
        self.network = network
        self.contract_name = contract_name
        self._address = address

    @property
    def address(self) -> str:
        return self._address

    def transact(self, function_name: str, *args: Any) -> Dict[str, Any]:
        self._ledger.check_failure(function_name, args)
        self._ledger.record(("transact", self._address, function_name, args))
        return {"status": 1, "blockNumber": len(self._ledger.calls)}


class FakeLedger:
    """In-memory Ledger handing out sequential addresses."""

    def __init__(self, chain_ids: Optional[Mapping[str, int]] = None):
        self.chain_ids = dict(chain_ids or {"testnet": TESTNET_CHAIN_ID})
        self.calls: List[Tuple[Any, ...]] = []
        self._failures: List[Tuple[str, Any, Exception]] = []
        self._counter = 0
        self._lock = threading.Lock()

    def record(self, call: Tuple[Any, ...]) -> None:
        with self._lock:
            self.calls.append(call)

    def fail_on(self, function_name: str, first_arg: Any = ANY_ARG, error: Optional[Exception] = None):
        """Make a matching deploy or transact raise error."""
        self._failures.append((function_name, first_arg, error or RuntimeError("boom")))

    def check_failure(self, function_name: str, args: Tuple[Any, ...]) -> None:
        for name, first_arg, error in self._failures:
            if name != function_name:
                continue
            if first_arg is ANY_ARG or (args and args[0] == first_arg):
                raise error

    def _check_network(self, network: str) -> None:
        if network not in self.chain_ids:
            raise NetworkNotFoundError(f"No RPC URL configured for network '{network}'")

    def next_address(self) -> str:
        with self._lock:
            self._counter += 1
            return "0x" + f"{self._counter:040x}"

    def chain_id(self, network: str) -> int:
        self._check_network(network)
        return self.chain_ids[network]

    def deploy(self, network: str, contract_name: str, libraries, *args: Any) -> FakeContractHandle:
        self._check_network(network)
        self.check_failure(contract_name, args)
        handle = FakeContractHandle(self, network, contract_name, self.next_address())
        self.record(("deploy", contract_name, args, handle.address))
        return handle

    def attach(self, network: str, contract_name: str, address: str) -> FakeContractHandle:
        self._check_network(network)
        self.record(("attach", contract_name, address))
        return FakeContractHandle(self, network, contract_name, address)

    def transactions(self) -> List[Tuple[str, Tuple[Any, ...]]]:
        """(function_name, args) for every transact call, in completion order."""
        return [(call[2], call[3]) for call in self.calls if call[0] == "transact"]

    def deployments(self) -> List[str]:
        """Contract names deployed, in order."""
        return [call[1] for call in self.calls if call[0] == "deploy"]


@pytest.fixture
def testnet_constants() -> Dict[str, Any]:
    """Constants table entry for the 'testnet' network."""
    return {
        "seloraV2Router": "0x" + "a" * 40,
        "seloraV3Router": "0x" + "b" * 40,
        "seloraV3Factory": "0x" + "c" * 40,
        "team": "0x" + "d" * 40,
        "weth": "0x" + "e" * 40,
        "trustedTokens": ["0x" + "1" * 40, "0x" + "2" * 40],
    }


@pytest.fixture
def constants_table(testnet_constants: Dict[str, Any]) -> ConstantsTable:
    """ConstantsTable holding only the 'testnet' network."""
    return ConstantsTable({"testnet": testnet_constants})


@pytest.fixture
def constants_file(tmp_path: Path, testnet_constants: Dict[str, Any]) -> Path:
    """Write the constants table to a temporary JSON file."""
    path = tmp_path / "constants.json"
    with open(path, "w") as f:
        json.dump({"testnet": testnet_constants}, f, indent=2)
    return path


@pytest.fixture
def fake_ledger() -> FakeLedger:
    """FakeLedger knowing only the 'testnet' network."""
    return FakeLedger()


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Directory for state records (not created in advance)."""
    return tmp_path / "scripts" / "deployments"


@pytest.fixture
def artifacts_dir(tmp_path: Path) -> Path:
    """Minimal hardhat artifacts tree with a plain contract and one needing a library."""
    root = tmp_path / "artifacts"

    router_dir = root / "contracts" / "SeloraV2Router.sol"
    router_dir.mkdir(parents=True)
    (router_dir / "SeloraV2Router.json").write_text(
        json.dumps(
            {
                "_format": "hh-sol-artifact-1",
                "contractName": "SeloraV2Router",
                "sourceName": "contracts/SeloraV2Router.sol",
                "abi": [{"type": "constructor", "inputs": [{"name": "factory", "type": "address"}]}],
                "bytecode": "0x6080604052",
                "deployedBytecode": "0x6080",
                "linkReferences": {},
            }
        )
    )
    (router_dir / "SeloraV2Router.dbg.json").write_text(json.dumps({"buildInfo": "x"}))

    placeholder = "__$0123456789abcdef0123456789abcdef01$__"
    linked_dir = root / "contracts" / "SwapExecutor.sol"
    linked_dir.mkdir(parents=True)
    (linked_dir / "SwapExecutor.json").write_text(
        json.dumps(
            {
                "_format": "hh-sol-artifact-1",
                "contractName": "SwapExecutor",
                "sourceName": "contracts/SwapExecutor.sol",
                "abi": [{"type": "function", "name": "addRouters", "inputs": []}],
                "bytecode": "0x6080" + placeholder + "6000",
                "deployedBytecode": "0x6080",
                "linkReferences": {
                    "contracts/libraries/PathLib.sol": {
                        "PathLib": [{"length": 20, "start": 2}]
                    }
                },
            }
        )
    )

    interface_dir = root / "contracts" / "interfaces" / "ISwapExecutor.sol"
    interface_dir.mkdir(parents=True)
    (interface_dir / "ISwapExecutor.json").write_text(
        json.dumps(
            {
                "contractName": "ISwapExecutor",
                "sourceName": "contracts/interfaces/ISwapExecutor.sol",
                "abi": [],
                "bytecode": "0x",
                "linkReferences": {},
            }
        )
    )

    return root
