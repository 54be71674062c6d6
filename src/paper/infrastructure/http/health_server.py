"""Health check and status HTTP server."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from aiohttp import web

if TYPE_CHECKING:
    from paper.application.services.channel_state_store import ChannelStateStore
    from paper.config import Config
    from paper.domain.services import WorkspaceDirectory
    from paper.infrastructure.events.loop import EventLoop
    from paper.infrastructure.events.scheduler import EventScheduler
    from paper.infrastructure.http.oauth import OAuthInstallHandler
    from paper.infrastructure.slack.client import SlackAppRunner

logger = logging.getLogger(__name__)


class HealthServer:
    """HTTP server for health, status and installation endpoints.

    Provides /live and /ready probes, a /status summary, and the OAuth
    install routes when an ``OAuthInstallHandler`` is given.
    """

    def __init__(
        self,
        config: Config,
        event_loop: EventLoop,
        event_scheduler: EventScheduler,
        slack_runner: SlackAppRunner,
        directory: WorkspaceDirectory,
        store: ChannelStateStore,
        oauth: OAuthInstallHandler | None = None,
        port: int = 10000,
    ) -> None:
        """Initialize the server.

        Args:
            config: Application settings.
            event_loop: EventLoop instance.
            event_scheduler: EventScheduler instance.
            slack_runner: SlackAppRunner instance.
            directory: Workspace directory.
            store: Channel state store.
            oauth: OAuth install routes (multi-workspace mode only).
            port: Port to listen on. Use 0 for any available port.
        """
        self._config = config
        self._event_loop = event_loop
        self._event_scheduler = event_scheduler
        self._slack_runner = slack_runner
        self._directory = directory
        self._store = store
        self._oauth = oauth
        self._port = port
        self._actual_port = port
        self._server: web.AppRunner | None = None
        self._site: web.TCPSite | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        """Check if the server is running."""
        return self._running

    @property
    def port(self) -> int:
        """Get the port the server is listening on."""
        return self._actual_port

    async def check_liveness(self) -> dict[str, Any]:
        """Check if the application is alive."""
        is_alive = self._event_loop.is_running
        return {
            "status": "alive" if is_alive else "dead",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    async def check_readiness(self) -> dict[str, Any]:
        """Check if the application is ready to serve traffic.

        Returns:
            Readiness status with component health details.
        """
        event_loop_ok = self._event_loop.is_running
        event_scheduler_ok = self._event_scheduler.is_running
        slack_ok = self._slack_runner.is_connected

        return {
            "ready": event_loop_ok and event_scheduler_ok and slack_ok,
            "event_loop": event_loop_ok,
            "event_scheduler": event_scheduler_ok,
            "slack": slack_ok,
        }

    def collect_status(self) -> dict[str, Any]:
        """Summarize installations and channel activity.

        Bot tokens are never included.
        """
        installations = [
            {
                "team_id": getattr(inst, "workspace_id", None),
                "team_name": getattr(inst, "workspace_name", None),
                "installed_at": inst.installed_at.isoformat(),
            }
            for inst in self._directory.installations()
        ]
        return {
            "app": self._config.canvas.app_name,
            "status": "running" if self._event_loop.is_running else "stopped",
            "mode": self._config.slack.mode.value,
            "workspaces": len(installations),
            "installations": installations,
            "channels": len(self._store),
            "in_flight_events": self._event_loop.in_flight,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    async def _handle_live(self, request: web.Request) -> web.Response:
        """Handle /live endpoint."""
        return web.json_response(await self.check_liveness())

    async def _handle_ready(self, request: web.Request) -> web.Response:
        """Handle /ready endpoint."""
        result = await self.check_readiness()
        status = 200 if result["ready"] else 503
        return web.json_response(result, status=status)

    async def _handle_status(self, request: web.Request) -> web.Response:
        """Handle / and /status endpoints."""
        return web.json_response(self.collect_status())

    def create_app(self) -> web.Application:
        """Build the aiohttp application with all routes."""
        app = web.Application()
        app.router.add_get("/", self._handle_status)
        app.router.add_get("/status", self._handle_status)
        app.router.add_get("/live", self._handle_live)
        app.router.add_get("/ready", self._handle_ready)
        if self._oauth is not None:
            self._oauth.add_routes(app)
        return app

    async def start(self) -> None:
        """Start the HTTP server."""
        self._server = web.AppRunner(self.create_app())
        await self._server.setup()

        self._site = web.TCPSite(self._server, "0.0.0.0", self._port)
        await self._site.start()

        # Get actual port (useful when port=0 for dynamic allocation)
        if self._site._server is not None:
            sockets = self._site._server.sockets  # type: ignore[union-attr]
            if sockets:
                self._actual_port = sockets[0].getsockname()[1]

        self._running = True
        logger.info("HTTP server started on port %d", self.port)

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self._server is not None:
            await self._server.cleanup()
            self._server = None
            self._site = None

        self._running = False
        logger.info("HTTP server stopped")
