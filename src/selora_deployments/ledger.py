"""Chain access for selora-deployments library.

The deployment flows only talk to the chain through two small interfaces:

- ``Ledger``: resolve a network's chain id, deploy a contract kind, attach to
  an already deployed address.
- ``ContractHandle``: a live contract bound to one network connection that
  reports its address and accepts mutating calls.

``Web3Ledger`` implements them on top of web3.py, eth_defi's contract loading
and deployment helpers, and a local signing key.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Type, Union

import requests
from eth_account import Account
from eth_defi.abi import get_deployed_contract
from eth_defi.deploy import ContractDeploymentFailed, deploy_contract
from eth_defi.hotwallet import HotWallet
from eth_defi.tx import get_tx_broadcast_data
from web3 import Web3
from web3.contract import Contract
from web3.exceptions import ABIFunctionNotFound, TimeExhausted, Web3Exception
from web3.types import TxReceipt

from .artifacts import get_contract_class, load_artifact
from .config import NetworkSettings, resolve_network_settings
from .constants import PRIVATE_KEY_ENV, RECEIPT_TIMEOUT
from .exceptions import ChainRejectedError, ConfigMissingError, LocatorMismatchError
from .paths import get_default_artifacts_dir
from .rpc import fetch_chain_id

logger = logging.getLogger(__name__)

class ContractHandle(Protocol):
    """A deployed contract bound to one network connection."""

    @property
    def address(self) -> str: ...

    def transact(self, function_name: str, *args: Any) -> Any: ...


class Ledger(Protocol):
    """Network connection and contract factory capabilities used by the flows."""

    def chain_id(self, network: str) -> int: ...

    def deploy(
        self,
        network: str,
        contract_name: str,
        libraries: Optional[Mapping[str, str]],
        *args: Any,
    ) -> ContractHandle: ...

    def attach(self, network: str, contract_name: str, address: str) -> ContractHandle: ...


# Failures reported by web3.py or its HTTP transport while talking to a node
_CHAIN_ERRORS = (Web3Exception, requests.RequestException)


class _Connection:
    """One web3 connection plus a hot wallet whose nonce counter is shared by all threads."""

    def __init__(self, settings: NetworkSettings, web3: Optional[Web3] = None):
        self.settings = settings
        self.web3 = web3 if web3 is not None else Web3(Web3.HTTPProvider(settings.rpc_url))
        self.wallet = (
            HotWallet(Account.from_key(settings.private_key)) if settings.private_key else None
        )
        self._nonce_lock = threading.Lock()

    @property
    def signer(self) -> HotWallet:
        if self.wallet is None:
            raise ConfigMissingError(
                f"No deployer key for network '{self.settings.name}': set ${PRIVATE_KEY_ENV}"
            )
        return self.wallet

    def _wait_for_receipt(self, tx_hash: bytes, description: str) -> TxReceipt:
        try:
            receipt = self.web3.eth.wait_for_transaction_receipt(tx_hash, timeout=RECEIPT_TIMEOUT)
        except TimeExhausted as e:
            raise ChainRejectedError(
                f"{description} not mined within {RECEIPT_TIMEOUT}s: tx {tx_hash.hex()}"
            ) from e
        except _CHAIN_ERRORS as e:
            raise ChainRejectedError(f"{description} receipt unavailable: {e}") from e

        if receipt["status"] != 1:
            raise ChainRejectedError(f"{description} reverted in tx {tx_hash.hex()}")
        return receipt

    def send(self, call: Any, description: str) -> TxReceipt:
        """
        Sign and submit a function call, then wait for its receipt.

        The call is built and gas-estimated before a nonce is reserved. Reserving,
        signing and broadcasting happen under the nonce lock, and the counter is
        rolled back if any of them fails, so concurrent callers never leave a gap.

        Args:
            call: Bound ContractFunction
            description: Human-readable label for logs and errors

        Returns:
            Transaction receipt with status 1

        Raises:
            ChainRejectedError: If the node rejects the transaction, it reverts or
                is not mined in time
        """
        wallet = self.signer
        try:
            tx = dict(call.build_transaction({"from": wallet.address}))
            tx.pop("nonce", None)

            with self._nonce_lock:
                nonce = wallet.current_nonce
                try:
                    if nonce is None:
                        wallet.sync_nonce(self.web3)
                    signed = wallet.sign_transaction_with_new_nonce(tx)
                    tx_hash = self.web3.eth.send_raw_transaction(get_tx_broadcast_data(signed))
                except Exception:
                    wallet.current_nonce = nonce
                    raise
        except _CHAIN_ERRORS as e:
            raise ChainRejectedError(f"{description} rejected: {e}") from e

        logger.debug("%s submitted in tx %s (nonce %d)", description, tx_hash.hex(), signed.nonce)
        return self._wait_for_receipt(tx_hash, description)

    def deploy(self, contract_class: Type[Contract], description: str, *args: Any) -> Contract:
        """
        Deploy a contract class through eth_defi and return the bound instance.

        ``deploy_contract`` reserves its nonce before estimating gas, so the nonce
        lock is held for the whole deployment and the counter is rolled back on
        any failure raised before the transaction is broadcast.

        Raises:
            ChainRejectedError: If the node rejects the deployment, it reverts or
                is not mined in time
        """
        wallet = self.signer
        with self._nonce_lock:
            nonce = wallet.current_nonce
            try:
                if nonce is None:
                    wallet.sync_nonce(self.web3)
                return deploy_contract(
                    self.web3,
                    contract_class,
                    wallet,
                    *args,
                    register_for_tracing=False,
                    confirmation_timeout=RECEIPT_TIMEOUT,
                )
            except ContractDeploymentFailed as e:
                raise ChainRejectedError(f"{description} reverted in tx {e.tx_hash.hex()}") from e
            except TimeExhausted as e:
                raise ChainRejectedError(
                    f"{description} not mined within {RECEIPT_TIMEOUT}s"
                ) from e
            except _CHAIN_ERRORS as e:
                wallet.current_nonce = nonce
                raise ChainRejectedError(f"{description} rejected: {e}") from e
            except Exception:
                wallet.current_nonce = nonce
                raise


class Web3ContractHandle:
    """ContractHandle backed by a web3.py contract instance."""

    def __init__(
        self,
        connection: _Connection,
        contract_name: str,
        contract: Contract,
        code_checked: bool = False,
    ):
        self._connection = connection
        self._contract_name = contract_name
        self._contract = contract
        self._code_checked = code_checked

    @property
    def address(self) -> str:
        return self._contract.address

    def _ensure_code(self) -> None:
        if self._code_checked:
            return
        try:
            code = self._connection.web3.eth.get_code(self.address)
        except _CHAIN_ERRORS as e:
            raise ChainRejectedError(f"Cannot read code at {self.address}: {e}") from e
        if len(code) == 0:
            raise LocatorMismatchError(
                f"No contract code at {self.address} (expected {self._contract_name})"
            )
        self._code_checked = True

    def transact(self, function_name: str, *args: Any) -> TxReceipt:
        """
        Submit a mutating call and wait until it is mined.

        Raises:
            LocatorMismatchError: If the address holds no code or the ABI lacks the function
            ChainRejectedError: If the transaction is rejected or reverts
        """
        self._ensure_code()
        try:
            function = getattr(self._contract.functions, function_name)
        except ABIFunctionNotFound as e:
            raise LocatorMismatchError(
                f"{self._contract_name} at {self.address} has no function '{function_name}'"
            ) from e

        description = f"{self._contract_name}.{function_name}"
        try:
            call = function(*args)
        except Web3Exception as e:
            raise ChainRejectedError(f"{description} rejected: {e}") from e

        receipt = self._connection.send(call, description)
        logger.info("%s confirmed in block %s", description, receipt["blockNumber"])
        return receipt


class Web3Ledger:
    """Ledger backed by web3.py with one cached connection per network."""

    def __init__(
        self,
        artifacts_dir: Optional[Union[Path, str]] = None,
        settings_resolver: Callable[[str], NetworkSettings] = resolve_network_settings,
    ):
        self._artifacts_dir = Path(artifacts_dir) if artifacts_dir else get_default_artifacts_dir()
        self._settings_resolver = settings_resolver
        self._connections: Dict[str, _Connection] = {}
        self._chain_ids: Dict[str, int] = {}

    def connect(self, network: str) -> _Connection:
        """
        Open or reuse the connection to a network.

        Raises:
            NetworkNotFoundError: If the network has no configured RPC URL
        """
        if network not in self._connections:
            settings = self._settings_resolver(network)
            logger.debug("Connecting to %s at %s", network, settings.rpc_url)
            self._connections[network] = _Connection(settings)
        return self._connections[network]

    def chain_id(self, network: str) -> int:
        if network not in self._chain_ids:
            self._chain_ids[network] = fetch_chain_id(self.connect(network).settings.rpc_url)
        return self._chain_ids[network]

    def deploy(
        self,
        network: str,
        contract_name: str,
        libraries: Optional[Mapping[str, str]],
        *args: Any,
    ) -> Web3ContractHandle:
        connection = self.connect(network)
        artifact = load_artifact(self._artifacts_dir, contract_name)
        contract_class = get_contract_class(connection.web3, artifact, libraries)

        contract = connection.deploy(contract_class, f"{contract_name} deployment", *args)
        return Web3ContractHandle(connection, contract_name, contract, code_checked=True)

    def attach(self, network: str, contract_name: str, address: str) -> Web3ContractHandle:
        connection = self.connect(network)
        artifact = load_artifact(self._artifacts_dir, contract_name)
        if not address:
            raise LocatorMismatchError(f"No {contract_name} address given")

        try:
            contract = get_deployed_contract(
                connection.web3, str(artifact.path), address, register_for_tracing=False
            )
        except ValueError as e:
            raise LocatorMismatchError(f"Invalid {contract_name} address {address!r}") from e
        return Web3ContractHandle(connection, contract_name, contract)
