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
# BASE STATION DATABASE (PostgreSQL)
# -----------------------------------------------------------------------------
# Responsibility: Persistent storage for provisioned base stations using
# PostgreSQL with connection pooling.
#
# Node IDs are caller-assigned: node_id is a plain INTEGER primary key with
# no sequence behind it. save_base_station() is an upsert on that key.
# -----------------------------------------------------------------------------

from contextlib import contextmanager

import psycopg2
from psycopg2.extras import RealDictCursor
from psycopg2.pool import SimpleConnectionPool
from rich.console import Console

from src.core.config import DatastoreConfig
from src.domain.models import BaseStation

console = Console()

# Connection and query timeouts to prevent pool exhaustion
CONNECT_TIMEOUT = 10
STATEMENT_TIMEOUT_MS = 30000

# Connection pool (initialized on first use)
_pool: SimpleConnectionPool | None = None
_datastore: DatastoreConfig = DatastoreConfig()


def configure(datastore: DatastoreConfig) -> None:
    """
    Point the pool at a datastore. Must run before the first query.

    An already open pool is closed so the next query reconnects.
    """
    global _datastore
    close_pool()
    _datastore = datastore


def _get_pool() -> SimpleConnectionPool:
    """Get or create the connection pool."""
    global _pool

    if _pool is None:
        try:
            _pool = SimpleConnectionPool(
                minconn=1,
                maxconn=10,
                host=_datastore.host,
                port=_datastore.port,
                user=_datastore.user,
                password=_datastore.password,
                database=_datastore.database,
                connect_timeout=CONNECT_TIMEOUT,
                options=f"-c statement_timeout={STATEMENT_TIMEOUT_MS}",
            )
            console.print(
                f"[green][DB] Connection pool created: {_datastore.host}:{_datastore.port} "
                f"(timeout: {CONNECT_TIMEOUT}s)[/green]"
            )
        except psycopg2.Error as e:
            console.print(f"[red][DB] Failed to create connection pool: {e}[/red]")
            raise

    return _pool


@contextmanager
def get_connection():
    """
    Context manager for database connections from the pool.

    Commits on success, rolls back on any exception, and always returns
    the connection to the pool.
    """
    pool = _get_pool()
    conn = pool.getconn()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        pool.putconn(conn)


def init_db() -> None:
    """
    Initialize the base_stations table.

    Called at application startup. Safe to call multiple times.
    """
    with get_connection() as conn, conn.cursor() as cursor:
        cursor.execute("""
                CREATE TABLE IF NOT EXISTS base_stations (
                    node_id INTEGER PRIMARY KEY,
                    network_id INTEGER NOT NULL,
                    network_name VARCHAR(128) NOT NULL,
                    streaming_enabled BOOLEAN NOT NULL DEFAULT FALSE,
                    container_id VARCHAR(64),
                    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP
                )
            """)

        cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_base_stations_network
                ON base_stations(network_name)
            """)

    console.print(f"[green][DB] Database initialized: {_datastore.database}[/green]")


def _row_to_station(row: dict) -> BaseStation:
    return BaseStation(
        node_id=row["node_id"],
        network_id=row["network_id"],
        network_name=row["network_name"],
        streaming_enabled=row["streaming_enabled"],
        container_id=row.get("container_id"),
        created_at=row["created_at"].isoformat() if row.get("created_at") else None,
        updated_at=row["updated_at"].isoformat() if row.get("updated_at") else None,
    )


def save_base_station(station: BaseStation) -> None:
    """
    Insert or update a base station keyed by node_id.

    Saving the same node_id twice leaves a single row holding the latest
    values.
    """
    with get_connection() as conn, conn.cursor() as cursor:
        cursor.execute(
            """
                INSERT INTO base_stations
                    (node_id, network_id, network_name, streaming_enabled, container_id, created_at)
                VALUES (%s, %s, %s, %s, %s, CURRENT_TIMESTAMP)
                ON CONFLICT (node_id) DO UPDATE SET
                    network_id = EXCLUDED.network_id,
                    network_name = EXCLUDED.network_name,
                    streaming_enabled = EXCLUDED.streaming_enabled,
                    container_id = EXCLUDED.container_id,
                    updated_at = CURRENT_TIMESTAMP
                """,
            (
                station.node_id,
                station.network_id,
                station.network_name,
                station.streaming_enabled,
                station.container_id,
            ),
        )

    console.print(f"[cyan][DB] Base station saved: {station.node_id}[/cyan]")


def get_base_station(node_id: int) -> BaseStation | None:
    """
    Retrieve a base station by node ID.

    Returns:
        BaseStation if found, None otherwise.
    """
    with get_connection() as conn, conn.cursor(cursor_factory=RealDictCursor) as cursor:
        cursor.execute("SELECT * FROM base_stations WHERE node_id = %s", (node_id,))
        row = cursor.fetchone()

        if row is None:
            return None

        return _row_to_station(row)


def list_base_stations(limit: int = 50) -> list[BaseStation]:
    """List base stations, most recently created first."""
    with get_connection() as conn, conn.cursor(cursor_factory=RealDictCursor) as cursor:
        cursor.execute(
            """
                SELECT * FROM base_stations
                ORDER BY created_at DESC
                LIMIT %s
                """,
            (limit,),
        )
        return [_row_to_station(row) for row in cursor.fetchall()]


def close_pool() -> None:
    """
    Close all connections in the pool.

    Call this on application shutdown for clean cleanup.
    """
    global _pool

    if _pool is not None:
        _pool.closeall()
        _pool = None
        console.print("[cyan][DB] Connection pool closed[/cyan]")
