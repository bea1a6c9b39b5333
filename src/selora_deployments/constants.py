"""Configuration constants for selora-deployments library."""

# Contract identifiers as named in the hardhat compilation artifacts
SELORA_V2_ROUTER = "SeloraV2Router"
SELORA_V3_ROUTER = "SeloraV3Router"
SWAP_EXECUTOR = "SwapExecutor"

# Fee parameter passed to the SwapExecutor constructor (basis points)
DEFAULT_SWAP_EXECUTOR_FEE = 1000

# State record file naming, one file per chain id
STATE_FILE_PREFIX = "CoreOutput"

# Seconds to wait for a submitted transaction to be mined
RECEIPT_TIMEOUT = 120

# Environment variables
CONSTANTS_PATH_ENV = "SELORA_CONSTANTS_PATH"
ARTIFACTS_DIR_ENV = "SELORA_ARTIFACTS_DIR"
DEPLOYMENTS_DIR_ENV = "SELORA_DEPLOYMENTS_DIR"
PRIVATE_KEY_ENV = "DEPLOYER_PRIVATE_KEY"
LOG_LEVEL_ENV = "SELORA_LOG_LEVEL"

# Networks with a known RPC env var or default endpoint.
# Any other network name "foo-bar" reads its endpoint from FOO_BAR_RPC_URL.
NETWORK_CONFIG = {
    "localhost": {
        "default_rpc_env": "LOCALHOST_RPC_URL",
        "default_rpc_url": "http://127.0.0.1:8545",
    },
    "mainnet": {
        "default_rpc_env": "MAINNET_RPC_URL",
    },
    "sepolia": {
        "default_rpc_env": "SEP_RPC_URL",
    },
}
