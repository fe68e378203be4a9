#!/usr/bin/env python3
"""
List provisioned base stations from the database.

Use when:
- You want to check what the service has recorded without going through HTTP.
- You need to confirm a node was persisted after a provisioning call.

Run from project root:
  python scripts/list_base_stations.py [limit]

Requires: PostgreSQL running and DB env vars (DB_HOST, DB_NAME, etc.) or .env.
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

load_dotenv(PROJECT_ROOT / ".env")

from src.core import db
from src.core.config import load_config

if __name__ == "__main__":
    limit = int(sys.argv[1]) if len(sys.argv) > 1 else 50

    db.configure(load_config().datastore)
    db.init_db()
    stations = db.list_base_stations(limit=limit)

    table = Table(title=f"Base Stations ({len(stations)})")
    table.add_column("Node", justify="right")
    table.add_column("Network ID", justify="right")
    table.add_column("Network")
    table.add_column("Streaming")
    table.add_column("Container")
    table.add_column("Created")
    for s in stations:
        table.add_row(
            str(s.node_id),
            str(s.network_id),
            s.network_name,
            "yes" if s.streaming_enabled else "no",
            (s.container_id or "")[:12],
            s.created_at or "",
        )

    Console().print(table)
    db.close_pool()
