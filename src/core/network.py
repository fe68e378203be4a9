# -----------------------------------------------------------------------------
# NETWORK ENSURER & ATTACHMENT VERIFIER
# -----------------------------------------------------------------------------
# Responsibility: Guarantee a bridge network exists before a base station is
# created, and confirm afterwards that the container actually joined it.
#
# Check-then-create is serialised per network name inside this process.
# Across processes, a 409 Conflict from the Engine means another caller won
# the race; we re-list and use their network.
# -----------------------------------------------------------------------------

import threading
from contextlib import contextmanager

from docker import DockerClient
from docker.errors import APIError, NotFound
from docker.models.networks import Network
from rich.console import Console

from src.core.errors import NetworkError, VerificationError
from src.infra.docker_client import ENGINE_ERRORS

console = Console()

NETWORK_DRIVER = "bridge"


class NetworkEnsurer:
    """
    Idempotent network creation plus post-start membership checks.

    One instance is shared by all requests; locks are keyed by network name
    so unrelated networks never block each other. A lock lives only while
    some caller holds or waits on it.
    """

    def __init__(self, client: DockerClient) -> None:
        self._client = client
        self._locks: dict[str, tuple[threading.Lock, int]] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _locked(self, name: str):
        with self._locks_guard:
            lock, users = self._locks.get(name, (threading.Lock(), 0))
            self._locks[name] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._locks_guard:
                lock, users = self._locks[name]
                if users == 1:
                    del self._locks[name]
                else:
                    self._locks[name] = (lock, users - 1)

    def find_network(self, name: str) -> Network | None:
        """
        Look up a network by exact name.

        The Engine's name filter matches substrings, so results are narrowed
        to the exact name here.
        """
        matches = [n for n in self._client.networks.list(names=[name]) if n.name == name]
        return matches[0] if matches else None

    def ensure_network(self, name: str) -> Network:
        """
        Return the bridge network called `name`, creating it if absent.

        Raises:
            NetworkError: If the Engine rejects the listing or creation.
        """
        with self._locked(name):
            try:
                network = self.find_network(name)
                if network is not None:
                    console.print(f"[dim][NETWORK] Using existing network: {name}[/dim]")
                    return network

                try:
                    network = self._client.networks.create(name, driver=NETWORK_DRIVER)
                except APIError as e:
                    if e.status_code != 409:
                        raise
                    # Created concurrently by another process
                    network = self.find_network(name)
                    if network is None:
                        raise
                    console.print(f"[yellow][NETWORK] Network appeared concurrently: {name}[/yellow]")
                    return network

                console.print(f"[green][NETWORK] Created bridge network: {name}[/green]")
                return network
            except ENGINE_ERRORS as e:
                console.print(f"[red][NETWORK] Failed to ensure network {name}: {e}[/red]")
                raise NetworkError(f"Failed to ensure network '{name}': {e}") from e

    def is_attached(self, container_id: str, network_name: str) -> bool:
        """
        Report whether the container is a member of the network.

        Membership is read from the network's Containers map, which is keyed
        by full container ID.
        """
        try:
            network = self._client.networks.get(network_name)
        except NotFound:
            return False
        members = network.attrs.get("Containers") or {}
        return container_id in members

    def verify_attachment(self, container_id: str, network_name: str) -> None:
        """
        Raise unless the container has joined the network.

        The container is left running on failure.

        Raises:
            VerificationError: If the container is not a member, or the
                network cannot be inspected.
        """
        try:
            attached = self.is_attached(container_id, network_name)
        except ENGINE_ERRORS as e:
            raise VerificationError(
                f"Could not inspect network '{network_name}': {e}"
            ) from e

        if not attached:
            console.print(
                f"[red][NETWORK] Container {container_id[:12]} not attached to {network_name}[/red]"
            )
            raise VerificationError(
                f"Container {container_id[:12]} is not attached to network '{network_name}'"
            )

        console.print(f"[green][NETWORK] Verified {container_id[:12]} on {network_name}[/green]")
