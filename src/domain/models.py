# Copyright 2026 Pramod Kumar Voola
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# DOMAIN MODELS - BASE STATIONS
# -----------------------------------------------------------------------------
# These Pydantic models define the contract between the HTTP API and the
# provisioning core. Requests arrive in camelCase; the core speaks snake_case.
#
# Invalid requests are rejected before any Docker call is made.
# -----------------------------------------------------------------------------

from pydantic import BaseModel, Field


class BaseStationRequest(BaseModel):
    """
    Provisioning request for a single base station.

    Node identifiers are assigned by the caller; the service never
    generates them.
    """

    node_id: int = Field(..., alias="nodeId", description="Caller-assigned node ID")
    network_id: int = Field(..., alias="networkId", description="Cellular network ID")
    network_name: str = Field(
        ..., alias="networkName", max_length=128, description="Docker bridge network to join"
    )
    streaming_enabled: bool = Field(
        False, alias="streamingEnabled", description="Whether the node streams to the broker"
    )

    class Config:
        """Accept both wire (camelCase) and Python field names."""

        populate_by_name = True
        str_strip_whitespace = True


class BaseStation(BaseModel):
    """A persisted base station row."""

    node_id: int
    network_id: int
    network_name: str
    streaming_enabled: bool
    container_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_request(cls, request: BaseStationRequest, container_id: str | None = None):
        return cls(
            node_id=request.node_id,
            network_id=request.network_id,
            network_name=request.network_name,
            streaming_enabled=request.streaming_enabled,
            container_id=container_id,
        )


class ProvisionResult(BaseModel):
    """Outcome of a successful provisioning run."""

    node_id: int
    container_id: str
    container_name: str
    network_name: str
    host_port: int | None = None

    @property
    def message(self) -> str:
        return f"Base Station {self.node_id} created and started successfully!"
