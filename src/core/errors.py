# -----------------------------------------------------------------------------
# PROVISIONING ERRORS
# -----------------------------------------------------------------------------
# Every failure in the provisioning pipeline is raised as a ProvisioningError
# tagged with the stage that failed, so the API layer can report the kind
# without parsing messages.
# -----------------------------------------------------------------------------

from enum import Enum


class ErrorKind(str, Enum):
    """Pipeline stage that produced the failure."""

    NETWORK = "network"
    CONTAINER = "container"
    VERIFICATION = "verification"
    PERSISTENCE = "persistence"


class ProvisioningError(Exception):
    """Base class for all provisioning failures."""

    kind: ErrorKind

    def __init__(self, message: str, kind: ErrorKind | None = None) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class NetworkError(ProvisioningError):
    """Raised when the target network cannot be listed or created."""

    kind = ErrorKind.NETWORK


class ContainerError(ProvisioningError):
    """Raised when the base station container cannot be created or started."""

    kind = ErrorKind.CONTAINER


class VerificationError(ProvisioningError):
    """Raised when a started container is not a member of its network."""

    kind = ErrorKind.VERIFICATION


class PersistenceError(ProvisioningError):
    """Raised when the base station row cannot be saved."""

    kind = ErrorKind.PERSISTENCE
