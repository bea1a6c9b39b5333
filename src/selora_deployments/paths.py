"""Path management utilities for selora-deployments library."""

import os
from pathlib import Path
from typing import Optional, Union

from .constants import (
    ARTIFACTS_DIR_ENV,
    CONSTANTS_PATH_ENV,
    DEPLOYMENTS_DIR_ENV,
    STATE_FILE_PREFIX,
)


def _from_env(env_name: str, default: Path) -> Path:
    value = os.environ.get(env_name)
    if value:
        return Path(value).absolute()
    return default


def get_default_output_dir() -> Path:
    """
    Get default directory for deployment state records.

    Returns:
        $SELORA_DEPLOYMENTS_DIR if set, otherwise ./scripts/deployments
    """
    return _from_env(DEPLOYMENTS_DIR_ENV, Path.cwd() / "scripts" / "deployments")


def get_default_artifacts_dir() -> Path:
    """
    Get default hardhat artifacts directory.

    Returns:
        $SELORA_ARTIFACTS_DIR if set, otherwise ./artifacts
    """
    return _from_env(ARTIFACTS_DIR_ENV, Path.cwd() / "artifacts")


def get_default_constants_path() -> Path:
    """
    Get default path of the per-network constants table.

    Returns:
        $SELORA_CONSTANTS_PATH if set, otherwise ./scripts/constants.json
    """
    return _from_env(CONSTANTS_PATH_ENV, Path.cwd() / "scripts" / "constants.json")


def get_state_path(chain_id: int, output_dir: Optional[Union[Path, str]] = None) -> Path:
    """
    Get the state record path for a chain.

    The file name depends only on the chain id, so every alias of a chain
    shares one record.

    Args:
        chain_id: Numeric chain identifier
        output_dir: Custom output directory (defaults to get_default_output_dir())

    Returns:
        Path to <output_dir>/CoreOutput-<chain_id>.json
    """
    if output_dir is None:
        output_dir = get_default_output_dir()
    else:
        output_dir = Path(output_dir).absolute()

    return output_dir / f"{STATE_FILE_PREFIX}-{int(chain_id)}.json"
