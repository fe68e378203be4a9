# -----------------------------------------------------------------------------
# CONTAINER PROVISIONER
# -----------------------------------------------------------------------------
# Responsibility: Create and start one base station container from the
# configured image, wired to its network, broker and datastore.
#
# No resource limits, restart policy or health check are set; the container
# runs until someone else stops it.
# -----------------------------------------------------------------------------

from docker import DockerClient
from docker.models.containers import Container
from rich.console import Console

from src.core.config import BASE_STATION_PORT, ServiceConfig
from src.core.errors import ContainerError
from src.domain.models import BaseStationRequest
from src.infra.docker_client import ENGINE_ERRORS

console = Console()

CONTAINER_NAME_PREFIX = "base-station-"


def container_name(node_id: int) -> str:
    """Docker container name for a node."""
    return f"{CONTAINER_NAME_PREFIX}{node_id}"


def _env_bool(value: bool) -> str:
    return "true" if value else "false"


def build_environment(request: BaseStationRequest, config: ServiceConfig) -> list[str]:
    """
    Build the KEY=value environment list passed to the base station.

    Static broker/datastore settings come first, then the request fields.
    """
    datastore = config.datastore
    return [
        f"KAFKA_BROKER={config.kafka_broker}",
        f"SPRING_DATASOURCE_URL={datastore.jdbc_url}",
        f"SPRING_DATASOURCE_USERNAME={datastore.user}",
        f"SPRING_DATASOURCE_PASSWORD={datastore.password}",
        f"NODE_ID={request.node_id}",
        f"NETWORK_ID={request.network_id}",
        f"NETWORK_NAME={request.network_name}",
        f"STREAMING_ENABLED={_env_bool(request.streaming_enabled)}",
    ]


class ContainerProvisioner:
    """Creates and immediately starts base station containers."""

    def __init__(self, client: DockerClient, config: ServiceConfig) -> None:
        self._client = client
        self._config = config

    def provision(self, request: BaseStationRequest, network_name: str) -> Container:
        """
        Create and start the container for `request` on `network_name`.

        Port 8080/tcp is published to an Engine-assigned host port.

        Raises:
            ContainerError: If the Engine rejects creation or start.
        """
        name = container_name(request.node_id)
        port_key = f"{BASE_STATION_PORT}/tcp"

        try:
            container = self._client.containers.create(
                self._config.base_station_image,
                name=name,
                ports={port_key: None},
                network=network_name,
                environment=build_environment(request, self._config),
            )
        except ENGINE_ERRORS as e:
            console.print(f"[red][PROVISION] Create failed for {name}: {e}[/red]")
            raise ContainerError(f"Failed to create container '{name}': {e}") from e

        console.print(f"[cyan][PROVISION] Created {name} ({container.short_id})[/cyan]")

        try:
            container.start()
        except ENGINE_ERRORS as e:
            console.print(f"[red][PROVISION] Start failed for {name}: {e}[/red]")
            raise ContainerError(f"Failed to start container '{name}': {e}") from e

        console.print(f"[green][PROVISION] Started {name} on {network_name}[/green]")
        return container

    def host_port(self, container: Container) -> int | None:
        """
        Read the host port the Engine bound to the base station port.

        Returns None when the port has not been published yet.
        """
        try:
            container.reload()
        except ENGINE_ERRORS as e:
            console.print(f"[yellow][PROVISION] Could not reload {container.short_id}: {e}[/yellow]")
            return None

        ports = container.attrs.get("NetworkSettings", {}).get("Ports") or {}
        bindings = ports.get(f"{BASE_STATION_PORT}/tcp") or []
        for binding in bindings:
            host_port = binding.get("HostPort")
            if host_port:
                return int(host_port)
        return None
