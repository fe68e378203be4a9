# -----------------------------------------------------------------------------
# DOMAIN LAYER
# -----------------------------------------------------------------------------
# Contains the Pydantic models that define the contract between the
# HTTP API and the provisioning core.
# -----------------------------------------------------------------------------

from .models import BaseStation, BaseStationRequest, ProvisionResult

__all__ = ["BaseStation", "BaseStationRequest", "ProvisionResult"]
