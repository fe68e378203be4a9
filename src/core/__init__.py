# -----------------------------------------------------------------------------
# CORE LAYER
# -----------------------------------------------------------------------------
# The business logic of the base station manager:
# - NetworkEnsurer: Idempotent bridge networks + attachment checks
# - ContainerProvisioner: Create and start base station containers
# - BaseStationManager: Provisioning pipeline orchestrator
# - DB: PostgreSQL base station persistence
# -----------------------------------------------------------------------------

from .config import ServiceConfig, load_config
from .errors import (
    ContainerError,
    ErrorKind,
    NetworkError,
    PersistenceError,
    ProvisioningError,
    VerificationError,
)
from .manager import BaseStationManager
from .network import NetworkEnsurer
from .provisioner import ContainerProvisioner

__all__ = [
    "ServiceConfig", "load_config",
    "ProvisioningError", "ErrorKind",
    "NetworkError", "ContainerError", "VerificationError", "PersistenceError",
    "BaseStationManager", "NetworkEnsurer", "ContainerProvisioner",
]
