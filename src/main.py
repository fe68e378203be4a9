# -----------------------------------------------------------------------------
# BASE STATION MANAGER - FASTAPI INTERFACE
# -----------------------------------------------------------------------------
# Endpoints:
# - GET  /health                 : Health check
# - POST /create-base-station    : Provision one base station (text response)
# - GET  /base-stations          : List provisioned base stations
# - GET  /base-stations/{node_id}: Get one base station
# -----------------------------------------------------------------------------

import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from rich.console import Console
from rich.panel import Panel

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Load environment variables
from dotenv import load_dotenv

load_dotenv(PROJECT_ROOT / ".env")

from src.core import db
from src.core.config import ServiceConfig, load_config
from src.core.errors import ProvisioningError
from src.core.manager import BaseStationManager
from src.domain.models import BaseStation, BaseStationRequest
from src.infra.docker_client import DockerProvider

console = Console()

SERVICE_NAME = "basestation-manager"
VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    config = load_config()
    print_banner(config)

    db.configure(config.datastore)
    db.init_db()

    provider = DockerProvider(timeout=config.docker_timeout)
    app.state.docker = provider
    app.state.manager = BaseStationManager(provider.get_client(), config)

    console.print("[green]BASE STATION MANAGER ONLINE[/green]")

    yield

    console.print("[yellow]BASE STATION MANAGER SHUTTING DOWN[/yellow]")
    provider.close()
    db.close_pool()


app = FastAPI(
    title="Base Station Manager",
    description="Provisions base station containers on Docker bridge networks",
    version=VERSION,
    lifespan=lifespan,
)


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================


def get_manager(request: Request) -> BaseStationManager:
    manager = getattr(request.app.state, "manager", None)
    if manager is None:
        raise HTTPException(status_code=503, detail="Manager not initialized")
    return manager


def get_docker(request: Request) -> DockerProvider | None:
    return getattr(request.app.state, "docker", None)


# =============================================================================
# ENDPOINTS
# =============================================================================


@app.get("/health")
def health_check(docker: Annotated[DockerProvider | None, Depends(get_docker)]):
    """Health check for load balancers."""
    return {
        "status": "online",
        "service": SERVICE_NAME,
        "version": VERSION,
        "docker": docker.is_connected() if docker else False,
    }


@app.post("/create-base-station", response_class=PlainTextResponse)
def create_base_station(
    request: BaseStationRequest,
    manager: Annotated[BaseStationManager, Depends(get_manager)],
):
    """
    Provision a base station.

    Always answers 200 with a plain-text message; failures also set the
    X-Provisioning-Error header to the failing stage.
    """
    try:
        result = manager.create_base_station(request)
    except ProvisioningError as e:
        console.print(f"[red][API] create-base-station failed ({e.kind.value}): {e}[/red]")
        return PlainTextResponse(
            f"Error creating Base Station: {e}",
            headers={"X-Provisioning-Error": e.kind.value},
        )

    return PlainTextResponse(result.message)


@app.get("/base-stations", response_model=list[BaseStation])
def list_all_base_stations(
    manager: Annotated[BaseStationManager, Depends(get_manager)],
    limit: int = 50,
):
    """List recently provisioned base stations."""
    try:
        return manager.list_base_stations(limit=limit)
    except ProvisioningError as e:
        console.print(f"[red][API] list failed: {e}[/red]")
        raise HTTPException(status_code=503, detail=str(e))


@app.get("/base-stations/{node_id}", response_model=BaseStation)
def get_one_base_station(
    node_id: int,
    manager: Annotated[BaseStationManager, Depends(get_manager)],
):
    """Get a base station by node ID."""
    try:
        station = manager.get_base_station(node_id)
    except ProvisioningError as e:
        console.print(f"[red][API] lookup failed: {e}[/red]")
        raise HTTPException(status_code=503, detail=str(e))

    if station is None:
        raise HTTPException(status_code=404, detail="Base station not found")
    return station


# =============================================================================
# BANNER
# =============================================================================


def print_banner(config: ServiceConfig) -> None:
    """Print the startup banner."""
    console.print(
        Panel(
            f"[bold cyan]BASE STATION MANAGER v{VERSION}[/bold cyan]\n\n"
            f"Image:   {config.base_station_image}\n"
            f"Network: {config.default_network}\n"
            f"Broker:  {config.kafka_broker}\n"
            f"DB:      {config.datastore.host}:{config.datastore.port}/{config.datastore.database}",
            border_style="cyan",
        )
    )


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("SERVICE_PORT", "8090"))
    uvicorn.run(app, host="0.0.0.0", port=port)
