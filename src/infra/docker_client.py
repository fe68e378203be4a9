# -----------------------------------------------------------------------------
# DOCKER PROVIDER
# -----------------------------------------------------------------------------
# Responsibility: A thin wrapper around the Docker SDK with connection
# validation and detailed error reporting.
#
# This is part of the Infrastructure layer - it hands a verified client to
# the provisioning core without exposing SDK connection details.
# -----------------------------------------------------------------------------

import docker
from docker import DockerClient
from docker.errors import DockerException
from requests.exceptions import RequestException
from rich.console import Console
from rich.panel import Panel

console = Console()

# Response timeout for Engine API calls (seconds)
DEFAULT_TIMEOUT = 45

# Errors an Engine API call can raise. Transport failures (read timeouts,
# dropped sockets) come from requests and are not wrapped by the SDK.
ENGINE_ERRORS = (DockerException, RequestException)


class DockerProviderError(Exception):
    """Raised when the Docker Engine cannot be reached."""

    pass


class DockerProvider:
    """
    Docker SDK wrapper that fails fast when the Engine is unavailable.

    The client is built from the standard DOCKER_HOST / DOCKER_* environment,
    which defaults to the local Unix socket.
    """

    def __init__(self, timeout: int = DEFAULT_TIMEOUT) -> None:
        """
        Initialize the Docker provider.

        Args:
            timeout: Response timeout in seconds for Engine API calls.
        """
        self._client: DockerClient | None = None
        self._timeout = timeout

        self._connect()

    def _connect(self) -> None:
        """
        Establish connection to Docker daemon.

        Raises:
            DockerProviderError: If the Engine does not answer a ping.
        """
        try:
            self._client = docker.from_env(timeout=self._timeout)
            self._client.ping()
            console.print("[green][DOCKER] Connected to Docker Engine[/green]")
        except ENGINE_ERRORS as e:
            self._client = None
            console.print(
                Panel(
                    "[bold red]CRITICAL: Docker Engine Unavailable[/bold red]\n\n"
                    f"{e}\n\n"
                    "Check that the Docker socket is mounted and DOCKER_HOST is correct.",
                    title="SYSTEM HALT",
                    border_style="red",
                )
            )
            raise DockerProviderError(f"Docker Engine is not available: {e}") from e

    def get_client(self) -> DockerClient:
        """
        Get the Docker client, verifying connection is still active.

        Returns:
            Active DockerClient instance.

        Raises:
            DockerProviderError: If Docker connection is lost and cannot be restored.
        """
        if self._client is None:
            raise DockerProviderError("Docker client not initialized")

        try:
            self._client.ping()
            return self._client
        except ENGINE_ERRORS as e:
            console.print(f"[red][DOCKER] Connection lost: {e}[/red]")
            self._connect()
            return self._client

    def is_connected(self) -> bool:
        """
        Check if Docker is currently reachable.

        Returns:
            True if Docker is connected and responsive.
        """
        if self._client is None:
            return False
        try:
            self._client.ping()
            return True
        except ENGINE_ERRORS:
            return False

    def close(self) -> None:
        """Release the underlying HTTP session."""
        if self._client is not None:
            self._client.close()
            self._client = None
            console.print("[cyan][DOCKER] Client closed[/cyan]")
