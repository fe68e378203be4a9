"""
Pytest configuration and fixtures for base station manager tests.
"""

import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables
os.environ.setdefault("DB_HOST", "localhost")
os.environ.setdefault("DB_PORT", "5432")
os.environ.setdefault("DB_USER", "test")
os.environ.setdefault("DB_PASSWORD", "test")
os.environ.setdefault("DB_NAME", "test_db")

FULL_CONTAINER_ID = "f" * 64


def make_network(name: str, members: dict | None = None) -> MagicMock:
    network = MagicMock()
    network.name = name
    network.attrs = {"Name": name, "Driver": "bridge", "Containers": members or {}}
    return network


@pytest.fixture
def container_id():
    """Full 64-character ID of the mocked base station container."""
    return FULL_CONTAINER_ID


@pytest.fixture
def network_factory():
    """Build mock Network objects."""
    return make_network


@pytest.fixture
def service_config():
    """Static service configuration."""
    from src.core.config import DatastoreConfig, ServiceConfig

    return ServiceConfig(
        base_station_image="base-station:test",
        default_network="default-net",
        kafka_broker="kafka:9092",
        datastore=DatastoreConfig(
            host="db", port=5432, database="stations", user="bs", password="pw"
        ),
    )


@pytest.fixture
def station_request():
    """The canonical provisioning request."""
    from src.domain.models import BaseStationRequest

    return BaseStationRequest(nodeId=7, networkId=3, networkName="net-a", streamingEnabled=True)


@pytest.fixture
def mock_container():
    container = MagicMock()
    container.id = FULL_CONTAINER_ID
    container.short_id = FULL_CONTAINER_ID[:10]
    container.attrs = {
        "NetworkSettings": {"Ports": {"8080/tcp": [{"HostIp": "0.0.0.0", "HostPort": "49153"}]}}
    }
    return container


@pytest.fixture
def mock_docker_client(mock_container):
    """
    Mock Docker client with an in-memory network registry.

    networks.create registers a network; networks.get returns it with the
    container FULL_CONTAINER_ID attached.
    """
    client = MagicMock()
    client.ping.return_value = True

    registry: dict[str, MagicMock] = {}

    def list_networks(names=None, **kwargs):
        wanted = names or []
        return [n for key, n in registry.items() if any(w in key for w in wanted)]

    def create_network(name, driver=None, **kwargs):
        network = make_network(name, {FULL_CONTAINER_ID: {"Name": "base-station"}})
        registry[name] = network
        return network

    def get_network(name):
        from docker.errors import NotFound

        if name not in registry:
            raise NotFound(f"network {name} not found")
        return registry[name]

    client.networks.list.side_effect = list_networks
    client.networks.create.side_effect = create_network
    client.networks.get.side_effect = get_network
    client.networks.registry = registry

    client.containers.create.return_value = mock_container

    return client
