"""Health API for the warehouse connection pool.

Runs beside the MCP transport on its own port. It reports on the process
and the pool only; no warehouse metadata is served here.
"""

import asyncio
from datetime import datetime
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, HTTPException

from redshift_mcp import __version__
from redshift_mcp.lib.logging_config import get_logger
from redshift_mcp.services.database_service import DatabaseService

logger = get_logger(__name__)


class HealthAPI:
    """FastAPI app exposing liveness, readiness and pool occupancy."""

    def __init__(self, db_service: Optional[DatabaseService] = None,
                 host: str = "0.0.0.0", port: int = 8080):
        """Initialize health API service.

        Args:
            db_service: Pool to report on; without one every check reports degraded
            host: Host to bind the health API to
            port: Port to bind the health API to
        """
        self.db_service = db_service
        self.host = host
        self.port = port
        self.started_at = datetime.now()
        self.app = FastAPI(title="Redshift MCP Health API", version=__version__)
        self.app.add_api_route("/health", self.health, methods=["GET"])
        self.app.add_api_route("/health/pool", self.pool, methods=["GET"])
        self.app.add_api_route("/health/ready", self.ready, methods=["GET"])
        self.app.add_api_route("/health/live", self.live, methods=["GET"])

    @property
    def pool_initialized(self) -> bool:
        return bool(self.db_service and self.db_service.pool)

    async def health(self) -> Dict[str, Any]:
        """Uptime, pool state and the result of a ``SELECT 1`` check."""
        connected = await self._check_database()
        return {
            "status": "healthy" if connected else "degraded",
            "database_connected": connected,
            "pool_initialized": self.pool_initialized,
            "timestamp": datetime.now().isoformat(),
            "uptime_seconds": (datetime.now() - self.started_at).total_seconds(),
            "version": __version__
        }

    async def pool(self) -> Dict[str, Any]:
        """Borrowed and free connections."""
        if not self.db_service:
            raise HTTPException(status_code=503, detail="Database service not configured")
        return {
            "connection_pool": self.db_service.pool_status(),
            "database": self.db_service.config.get('database', 'unknown'),
            "timestamp": datetime.now().isoformat()
        }

    async def ready(self) -> Dict[str, Any]:
        if not await self._check_database():
            raise HTTPException(status_code=503, detail="Warehouse not reachable")
        return {"ready": True, "timestamp": datetime.now().isoformat()}

    async def live(self) -> Dict[str, Any]:
        return {"alive": True, "timestamp": datetime.now().isoformat()}

    async def _check_database(self) -> bool:
        # ping borrows a pooled connection, so it runs off the event loop
        if not self.pool_initialized:
            return False
        try:
            return await asyncio.to_thread(self.db_service.ping)
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return False

    def run(self):
        """Serve the health API until the process exits."""
        logger.info(f"Starting Health API on {self.host}:{self.port}")
        uvicorn.run(self.app, host=self.host, port=self.port, log_level="warning")
