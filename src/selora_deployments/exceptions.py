"""Custom exception classes for selora-deployments library."""


class DeploymentError(Exception):
    """Base exception for deployment-related errors."""

    pass


class ConfigMissingError(DeploymentError, KeyError):
    """Raised when a network or one of its fields is absent from the constants table."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return Exception.__str__(self)


class NetworkNotFoundError(ConfigMissingError):
    """Raised when no RPC endpoint is configured for a network."""

    pass


class UnknownContractError(DeploymentError, ValueError):
    """Raised when a contract identifier has no compilation artifact or cannot be linked."""

    pass


class StateMissingError(DeploymentError, FileNotFoundError):
    """Raised when the deployment state record for a chain does not exist."""

    pass


class StateFormatError(DeploymentError, ValueError):
    """Raised when a deployment state record cannot be parsed."""

    pass


class StateWriteError(DeploymentError, OSError):
    """Raised when a deployment state record cannot be written."""

    pass


class ChainRejectedError(DeploymentError, RuntimeError):
    """Raised when a submitted transaction reverts or is rejected by the node."""

    pass


class LocatorMismatchError(DeploymentError, ValueError):
    """Raised when an attached address does not implement the expected contract."""

    pass


class RpcError(DeploymentError, RuntimeError):
    """Raised when an RPC endpoint cannot be reached or returns an unusable answer."""

    pass
