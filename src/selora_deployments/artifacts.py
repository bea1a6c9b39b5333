"""Hardhat compilation artifact loading for selora-deployments library."""

from pathlib import Path
from typing import Dict, Mapping, Optional, Type

from eth_defi.abi import get_abi_by_filename, get_contract, link_libraries_hardhat
from web3 import Web3
from web3.contract import Contract

from .exceptions import UnknownContractError
from .types import ContractArtifact


def find_artifact_file(artifacts_dir: Path, contract_name: str) -> Path:
    """
    Locate the artifact JSON for a contract.

    Accepts a bare contract name ("SwapExecutor") or a fully qualified one
    ("contracts/SwapExecutor.sol:SwapExecutor").

    Args:
        artifacts_dir: Hardhat artifacts root
        contract_name: Contract identifier

    Returns:
        Path to the artifact file

    Raises:
        UnknownContractError: If no artifact or more than one artifact matches
    """
    if ":" in contract_name:
        source_name, name = contract_name.rsplit(":", 1)
        candidate = artifacts_dir / source_name / f"{name}.json"
        if not candidate.exists():
            raise UnknownContractError(f"No artifact for '{contract_name}' in {artifacts_dir}")
        return candidate

    # Skip build-info and *.dbg.json companions
    matches = [
        p
        for p in artifacts_dir.rglob(f"{contract_name}.json")
        if "build-info" not in p.parts and p.parent.suffix == ".sol"
    ]

    if not matches:
        raise UnknownContractError(f"No artifact for '{contract_name}' in {artifacts_dir}")
    if len(matches) > 1:
        sources = ", ".join(sorted(str(p.parent.relative_to(artifacts_dir)) for p in matches))
        raise UnknownContractError(
            f"Contract name '{contract_name}' is ambiguous ({sources}); use a fully qualified name"
        )
    return matches[0]


def load_artifact(artifacts_dir: Path, contract_name: str) -> ContractArtifact:
    """
    Load a hardhat artifact.

    Args:
        artifacts_dir: Hardhat artifacts root
        contract_name: Bare or fully qualified contract name

    Returns:
        ContractArtifact with abi, bytecode, link references and the file it came from

    Raises:
        UnknownContractError: If the artifact is missing or has no bytecode
    """
    artifact_path = find_artifact_file(Path(artifacts_dir), contract_name).resolve()

    # Absolute paths bypass eth_defi's bundled ABI directory
    interface = get_abi_by_filename(str(artifact_path))

    bytecode = interface.get("bytecode") or ""
    if bytecode in ("", "0x"):
        raise UnknownContractError(
            f"Artifact for '{contract_name}' has no bytecode (abstract contract or interface?)"
        )

    return ContractArtifact(
        name=interface.get("contractName", contract_name),
        abi=interface["abi"],
        bytecode=bytecode,
        link_references=interface.get("linkReferences") or {},
        source_name=interface.get("sourceName"),
        path=artifact_path,
    )


def build_library_export(
    artifact: ContractArtifact, libraries: Optional[Mapping[str, str]] = None
) -> Dict[str, Dict[str, Dict[str, str]]]:
    """
    Match library addresses to the artifact's link references.

    The result uses the hardhat export layout expected by
    ``eth_defi.abi.link_libraries_hardhat``.

    Args:
        artifact: Loaded contract artifact
        libraries: Library name (bare or fully qualified) -> deployed address

    Returns:
        ``{"contracts": {library_name: {"address": address}}}``

    Raises:
        UnknownContractError: If a referenced library has no address, an address is
            malformed, or a given library is not referenced by the contract
    """
    libraries = dict(libraries or {})
    contracts: Dict[str, Dict[str, str]] = {}
    used = set()

    for source_name, refs in artifact.link_references.items():
        for library_name in refs:
            qualified = f"{source_name}:{library_name}"
            key = qualified if qualified in libraries else library_name
            address = libraries.get(key)
            if address is None:
                raise UnknownContractError(
                    f"Contract '{artifact.name}' needs library '{qualified}'"
                )
            if not Web3.is_address(address):
                raise UnknownContractError(
                    f"Invalid address {address!r} for library '{library_name}'"
                )
            contracts[library_name] = {"address": address}
            used.add(key)

    unused = sorted(set(libraries) - used)
    if unused:
        raise UnknownContractError(
            f"Contract '{artifact.name}' does not link libraries: {', '.join(unused)}"
        )

    return {"contracts": contracts}


def get_contract_class(
    web3: Web3, artifact: ContractArtifact, libraries: Optional[Mapping[str, str]] = None
) -> Type[Contract]:
    """
    Get the deployable web3 contract class for an artifact, linking libraries first.

    Raises:
        UnknownContractError: If the libraries do not match the artifact's link references
    """
    export = build_library_export(artifact, libraries)

    bytecode = None
    if export["contracts"]:
        linked = link_libraries_hardhat(artifact.bytecode, artifact.link_references, export)
        bytecode = "0x" + linked.hex()

    return get_contract(web3, str(artifact.path), bytecode)
