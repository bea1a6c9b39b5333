"""Deployment state record persistence for selora-deployments library."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from .exceptions import StateFormatError, StateMissingError, StateWriteError
from .types import DeploymentState

logger = logging.getLogger(__name__)


def serialize_state(state: DeploymentState) -> str:
    """Render a state record as pretty-printed JSON."""
    return json.dumps(state.to_dict(), indent=2)


def load_state(path: Union[Path, str]) -> DeploymentState:
    """
    Load a deployment state record.

    Args:
        path: Path to CoreOutput-<chain_id>.json

    Returns:
        DeploymentState read from disk

    Raises:
        StateMissingError: If the file does not exist
        StateFormatError: If the file is not a valid state record
    """
    state_path = Path(path)
    if not state_path.exists():
        raise StateMissingError(
            f"Deployment state not found at {state_path}. Run the core deployment first."
        )

    try:
        with open(state_path, encoding="utf-8") as f:
            data = json.load(f)
        state = DeploymentState.from_dict(data)
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        raise StateFormatError(f"Invalid deployment state at {state_path}: {e}") from e

    logger.debug("Loaded state from %s: %s", state_path, state)
    return state


def save_state(path: Union[Path, str], state: DeploymentState) -> Path:
    """
    Create or overwrite a deployment state record.

    The whole record is serialized before anything touches disk, written to a
    temporary sibling and moved into place, so a failed write leaves any
    previous record intact.

    Args:
        path: Path to CoreOutput-<chain_id>.json
        state: Record to persist

    Returns:
        Path the record was written to

    Raises:
        StateWriteError: If the record could not be written

    Creates parent directories if they don't exist.
    """
    state_path = Path(path)
    payload = serialize_state(state)

    tmp_name = None
    try:
        state_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{state_path.name}.", suffix=".tmp", dir=state_path.parent
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, state_path)
    except OSError as e:
        logger.error("Error writing deployment state to %s: %s", state_path, e)
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise StateWriteError(f"Could not write deployment state to {state_path}: {e}") from e

    logger.info("Saved deployment state to %s", state_path)
    return state_path
