# -----------------------------------------------------------------------------
# THE BASE STATION MANAGER - PROVISIONING PIPELINE
# -----------------------------------------------------------------------------
# Orchestrates one provisioning request end to end:
#
#   ensure network -> create container -> start container
#     -> verify attachment -> persist record
#
# The pipeline is linear and stops at the first failure. Nothing is rolled
# back: a container that fails verification stays created and running.
# -----------------------------------------------------------------------------

import psycopg2
from docker import DockerClient
from rich.console import Console

from src.core.config import ServiceConfig
from src.core.db import get_base_station, list_base_stations, save_base_station
from src.core.errors import PersistenceError, ProvisioningError
from src.core.network import NetworkEnsurer
from src.core.provisioner import ContainerProvisioner, container_name
from src.domain.models import BaseStation, BaseStationRequest, ProvisionResult

console = Console()


class BaseStationManager:
    """
    Provisioning orchestrator.

    Holds no per-request state; one instance serves the whole process.
    """

    def __init__(self, client: DockerClient, config: ServiceConfig) -> None:
        self._config = config
        self._networks = NetworkEnsurer(client)
        self._provisioner = ContainerProvisioner(client, config)

        console.print(
            f"[green][MANAGER] Base station manager online "
            f"(image={config.base_station_image})[/green]"
        )

    def resolve_network(self, request: BaseStationRequest) -> str:
        """Target network for a request; blank names fall back to the default."""
        return request.network_name or self._config.default_network

    def create_base_station(self, request: BaseStationRequest) -> ProvisionResult:
        """
        Provision, verify and record one base station.

        Raises:
            ProvisioningError: Tagged with the stage that failed.
        """
        network_name = self.resolve_network(request)
        request = request.model_copy(update={"network_name": network_name})
        console.print(
            f"[cyan][MANAGER] Provisioning node {request.node_id} on {network_name}[/cyan]"
        )

        try:
            self._networks.ensure_network(network_name)
            container = self._provisioner.provision(request, network_name)
            self._networks.verify_attachment(container.id, network_name)
        except ProvisioningError as e:
            console.print(f"[red][MANAGER] Node {request.node_id} failed ({e.kind.value}): {e}[/red]")
            raise

        station = BaseStation.from_request(request, container_id=container.id)
        try:
            save_base_station(station)
        except psycopg2.Error as e:
            console.print(f"[red][MANAGER] Node {request.node_id} not persisted: {e}[/red]")
            raise PersistenceError(f"Failed to save base station {request.node_id}: {e}") from e

        result = ProvisionResult(
            node_id=request.node_id,
            container_id=container.id,
            container_name=container_name(request.node_id),
            network_name=network_name,
            host_port=self._provisioner.host_port(container),
        )
        console.print(f"[green][MANAGER] {result.message}[/green]")
        return result

    def get_base_station(self, node_id: int) -> BaseStation | None:
        """Look up a persisted base station."""
        try:
            return get_base_station(node_id)
        except psycopg2.Error as e:
            raise PersistenceError(f"Failed to load base station {node_id}: {e}") from e

    def list_base_stations(self, limit: int = 50) -> list[BaseStation]:
        """List persisted base stations, newest first."""
        try:
            return list_base_stations(limit)
        except psycopg2.Error as e:
            raise PersistenceError(f"Failed to list base stations: {e}") from e
