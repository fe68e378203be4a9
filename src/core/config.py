# -----------------------------------------------------------------------------
# SERVICE CONFIGURATION
# -----------------------------------------------------------------------------
# Responsibility: Read the static service settings from the environment once
# at startup and hand them to the provisioning core as a single object.
#
# Nothing below the API layer reads os.environ directly.
# -----------------------------------------------------------------------------

import os

from pydantic import BaseModel, Field

# Fixed port every base station image listens on
BASE_STATION_PORT = 8080


class DatastoreConfig(BaseModel):
    """PostgreSQL coordinates shared by the service and its base stations."""

    host: str = "localhost"
    port: int = 5432
    database: str = "base_stations"
    user: str = "basestation"
    password: str = "securepass"
    driver: str = "postgresql"

    @property
    def jdbc_url(self) -> str:
        """Connection URL in the form the base station image expects."""
        return f"jdbc:{self.driver}://{self.host}:{self.port}/{self.database}"


class ServiceConfig(BaseModel):
    """Static configuration injected into BaseStationManager."""

    base_station_image: str = "base-station:latest"
    default_network: str = "base-station-net"
    kafka_broker: str = "kafka:9092"
    docker_timeout: int = Field(45, gt=0)
    service_port: int = 8090
    datastore: DatastoreConfig = Field(default_factory=DatastoreConfig)


def load_config() -> ServiceConfig:
    """
    Build the service configuration from environment variables.

    Call after load_dotenv() so values from .env are visible.
    """
    datastore = DatastoreConfig(
        host=os.getenv("DB_HOST", "localhost"),
        port=int(os.getenv("DB_PORT", "5432")),
        database=os.getenv("DB_NAME", "base_stations"),
        user=os.getenv("DB_USER", "basestation"),
        password=os.getenv("DB_PASSWORD", "securepass"),
        driver=os.getenv("DB_DRIVER", "postgresql"),
    )
    return ServiceConfig(
        base_station_image=os.getenv("BASE_STATION_IMAGE", "base-station:latest"),
        default_network=os.getenv("DOCKER_NETWORK", "base-station-net"),
        kafka_broker=os.getenv("KAFKA_BROKER", "kafka:9092"),
        docker_timeout=int(os.getenv("DOCKER_TIMEOUT", "45")),
        service_port=int(os.getenv("SERVICE_PORT", "8090")),
        datastore=datastore,
    )
