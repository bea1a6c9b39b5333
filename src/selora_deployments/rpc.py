"""Raw JSON-RPC helpers for selora-deployments library."""

import logging

import requests

from .exceptions import RpcError

logger = logging.getLogger(__name__)


def fetch_chain_id(rpc_url: str, timeout: int = 30) -> int:
    """
    Ask an RPC endpoint for its chain id.

    Args:
        rpc_url: RPC endpoint URL
        timeout: Request timeout in seconds

    Returns:
        Chain id as an integer

    Raises:
        RpcError: If the endpoint is unreachable, answers with a non-200 status,
            returns an error object or a malformed result
    """
    try:
        response = requests.post(
            rpc_url,
            json={"jsonrpc": "2.0", "method": "eth_chainId", "params": [], "id": 1},
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise RpcError(f"Network error during RPC call: {e}") from e

    if response.status_code != 200:
        raise RpcError(f"RPC request failed with status {response.status_code}")

    try:
        result = response.json()
        if "error" in result:
            raise RpcError(f"RPC error: {result['error']}")
        chain_id = int(result["result"], 16)
    except (KeyError, TypeError, ValueError) as e:
        raise RpcError(f"Malformed eth_chainId response from {rpc_url}: {e}") from e

    logger.debug("RPC %s reports chain id %d", rpc_url, chain_id)
    return chain_id
