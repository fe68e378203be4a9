# -----------------------------------------------------------------------------
# INFRASTRUCTURE LAYER
# -----------------------------------------------------------------------------
# Contains low-level infrastructure wrappers:
# - DockerProvider: Docker SDK wrapper with connection validation
# -----------------------------------------------------------------------------

from .docker_client import ENGINE_ERRORS, DockerProvider, DockerProviderError

__all__ = ["ENGINE_ERRORS", "DockerProvider", "DockerProviderError"]
