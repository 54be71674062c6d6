"""HTTP server: health, status and OAuth installation."""

from paper.infrastructure.http.health_server import HealthServer
from paper.infrastructure.http.oauth import OAuthInstallHandler

__all__ = [
    "HealthServer",
    "OAuthInstallHandler",
]
