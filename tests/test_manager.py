# =============================================================================
# BASE STATION MANAGER TESTS
# =============================================================================
# Tests for the provisioning pipeline orchestration.
# =============================================================================

from unittest.mock import MagicMock, patch

import psycopg2
import pytest
import requests
from docker.errors import DockerException


class TestCreateBaseStation:
    """Test BaseStationManager.create_base_station."""

    @patch("src.core.manager.save_base_station")
    def test_success_persists_request_fields(
        self, mock_save, mock_docker_client, station_request, service_config, container_id
    ):
        """A successful run should persist the four request fields."""
        from src.core.manager import BaseStationManager

        manager = BaseStationManager(mock_docker_client, service_config)
        result = manager.create_base_station(station_request)

        mock_save.assert_called_once()
        station = mock_save.call_args[0][0]
        assert station.node_id == 7
        assert station.network_id == 3
        assert station.network_name == "net-a"
        assert station.streaming_enabled is True
        assert station.container_id == container_id

        assert "Base Station 7 created and started successfully" in result.message
        assert result.container_name == "base-station-7"
        assert result.network_name == "net-a"
        assert result.host_port == 49153

    @patch("src.core.manager.save_base_station")
    def test_pipeline_order(
        self, mock_save, mock_docker_client, mock_container, station_request, service_config
    ):
        """Network must exist before the container is created."""
        from src.core.manager import BaseStationManager

        calls = []
        mock_docker_client.networks.create.side_effect = (
            lambda name, **kw: calls.append("network") or MagicMock()
        )
        mock_docker_client.containers.create.side_effect = (
            lambda *a, **kw: calls.append("container") or mock_container
        )

        manager = BaseStationManager(mock_docker_client, service_config)
        with patch.object(manager._networks, "verify_attachment"):
            manager.create_base_station(station_request)

        assert calls == ["network", "container"]

    @patch("src.core.manager.save_base_station")
    def test_blank_network_uses_default(
        self, mock_save, mock_docker_client, service_config
    ):
        """A blank network name should fall back to the configured default."""
        from src.core.manager import BaseStationManager
        from src.domain.models import BaseStationRequest

        request = BaseStationRequest(nodeId=9, networkId=1, networkName="  ", streamingEnabled=False)
        result = BaseStationManager(mock_docker_client, service_config).create_base_station(request)

        assert result.network_name == "default-net"
        mock_docker_client.networks.create.assert_called_once_with("default-net", driver="bridge")

        _, kwargs = mock_docker_client.containers.create.call_args
        assert kwargs["network"] == "default-net"
        assert "NETWORK_NAME=default-net" in kwargs["environment"]
        assert mock_save.call_args[0][0].network_name == "default-net"

    @patch("src.core.manager.save_base_station")
    def test_verification_failure_skips_persistence(
        self, mock_save, mock_docker_client, mock_container, station_request, service_config
    ):
        """If the container is not on the network, nothing is saved."""
        from src.core.errors import ErrorKind, VerificationError
        from src.core.manager import BaseStationManager

        mock_container.id = "0" * 64

        with pytest.raises(VerificationError) as exc:
            BaseStationManager(mock_docker_client, service_config).create_base_station(
                station_request
            )

        assert exc.value.kind == ErrorKind.VERIFICATION
        mock_save.assert_not_called()
        # No rollback: the started container is left alone
        mock_container.remove.assert_not_called()
        mock_container.stop.assert_not_called()

    @patch("src.core.manager.save_base_station")
    def test_network_failure_skips_container(
        self, mock_save, mock_docker_client, station_request, service_config
    ):
        """A network failure should stop the pipeline before any container."""
        from src.core.errors import NetworkError
        from src.core.manager import BaseStationManager

        mock_docker_client.networks.list.side_effect = DockerException("daemon down")

        with pytest.raises(NetworkError):
            BaseStationManager(mock_docker_client, service_config).create_base_station(
                station_request
            )

        mock_docker_client.containers.create.assert_not_called()
        mock_save.assert_not_called()

    @patch("src.core.manager.save_base_station")
    def test_persistence_failure_is_tagged(
        self, mock_save, mock_docker_client, station_request, service_config
    ):
        """Database errors should surface as PersistenceError."""
        from src.core.errors import ErrorKind, PersistenceError
        from src.core.manager import BaseStationManager

        mock_save.side_effect = psycopg2.OperationalError("connection refused")

        with pytest.raises(PersistenceError) as exc:
            BaseStationManager(mock_docker_client, service_config).create_base_station(
                station_request
            )

        assert exc.value.kind == ErrorKind.PERSISTENCE


class TestEngineTransportFailures:
    """Transport errors from the SDK should be tagged by the stage that hit them."""

    @patch("src.core.manager.save_base_station")
    def test_network_read_timeout(
        self, mock_save, mock_docker_client, station_request, service_config
    ):
        """A timed-out network listing should raise NetworkError."""
        from src.core.errors import NetworkError
        from src.core.manager import BaseStationManager

        mock_docker_client.networks.list.side_effect = requests.exceptions.ReadTimeout("45s")

        with pytest.raises(NetworkError):
            BaseStationManager(mock_docker_client, service_config).create_base_station(
                station_request
            )

        mock_save.assert_not_called()

    @patch("src.core.manager.save_base_station")
    def test_container_create_connection_dropped(
        self, mock_save, mock_docker_client, station_request, service_config
    ):
        """A dropped socket during create should raise ContainerError."""
        from src.core.errors import ContainerError
        from src.core.manager import BaseStationManager

        mock_docker_client.containers.create.side_effect = requests.exceptions.ConnectionError(
            "connection aborted"
        )

        with pytest.raises(ContainerError):
            BaseStationManager(mock_docker_client, service_config).create_base_station(
                station_request
            )

        mock_save.assert_not_called()

    @patch("src.core.manager.save_base_station")
    def test_container_start_read_timeout(
        self, mock_save, mock_docker_client, mock_container, station_request, service_config
    ):
        """A timed-out start should raise ContainerError."""
        from src.core.errors import ContainerError
        from src.core.manager import BaseStationManager

        mock_container.start.side_effect = requests.exceptions.ReadTimeout("45s")

        with pytest.raises(ContainerError, match="start"):
            BaseStationManager(mock_docker_client, service_config).create_base_station(
                station_request
            )

        mock_save.assert_not_called()

    @patch("src.core.manager.save_base_station")
    def test_verification_read_timeout(
        self, mock_save, mock_docker_client, station_request, service_config
    ):
        """A timed-out network inspect should raise VerificationError."""
        from src.core.errors import VerificationError
        from src.core.manager import BaseStationManager

        mock_docker_client.networks.get.side_effect = requests.exceptions.ReadTimeout("45s")

        with pytest.raises(VerificationError):
            BaseStationManager(mock_docker_client, service_config).create_base_station(
                station_request
            )

        mock_save.assert_not_called()


class TestReadBack:
    """Test record lookups through the manager."""

    @patch("src.core.manager.get_base_station")
    def test_get_base_station(self, mock_get, mock_docker_client, service_config):
        """get_base_station should delegate to the DB."""
        from src.core.manager import BaseStationManager

        mock_get.return_value = None

        assert BaseStationManager(mock_docker_client, service_config).get_base_station(5) is None
        mock_get.assert_called_once_with(5)

    @patch("src.core.manager.list_base_stations")
    def test_list_failure_is_tagged(self, mock_list, mock_docker_client, service_config):
        """List errors should surface as PersistenceError."""
        from src.core.errors import PersistenceError
        from src.core.manager import BaseStationManager

        mock_list.side_effect = psycopg2.OperationalError("gone")

        with pytest.raises(PersistenceError):
            BaseStationManager(mock_docker_client, service_config).list_base_stations()
