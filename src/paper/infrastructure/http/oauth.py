"""OAuth installation routes for multi-workspace mode."""

import html
import logging

from aiohttp import web
from slack_sdk.errors import SlackApiError
from slack_sdk.oauth import AuthorizeUrlGenerator
from slack_sdk.web.async_client import AsyncWebClient

from paper.config import SlackConfig
from paper.domain.entities import MultiWorkspaceInstallation
from paper.infrastructure.slack.workspace_client import slack_error_code
from paper.infrastructure.slack.workspace_directory import InMemoryWorkspaceDirectory

logger = logging.getLogger(__name__)

INSTALL_PATH = "/slack/install"
REDIRECT_PATH = "/slack/oauth_redirect"

_PAGE = """<!DOCTYPE html>
<html>
  <head><title>{app_name}</title></head>
  <body style="font-family: -apple-system, BlinkMacSystemFont, sans-serif; text-align: center; padding: 50px;">
    <h1>{heading}</h1>
    <p>{detail}</p>
  </body>
</html>
"""


class OAuthInstallHandler:
    """Serves the Slack OAuth v2 install flow.

    ``/slack/install`` redirects to Slack's authorize page and
    ``/slack/oauth_redirect`` exchanges the returned code for a bot token
    and stores the installation. The ``state`` parameter is not verified.
    """

    def __init__(
        self,
        config: SlackConfig,
        directory: InMemoryWorkspaceDirectory,
        app_name: str = "Paper",
        oauth_client: AsyncWebClient | None = None,
    ) -> None:
        """Initialize the handler.

        Args:
            config: Slack settings with client credentials and scopes.
            directory: Where new installations are stored.
            app_name: Name shown on result pages.
            oauth_client: Token-less client used for ``oauth.v2.access``.
        """
        self._config = config
        self._directory = directory
        self._app_name = app_name
        self._oauth_client = oauth_client or AsyncWebClient()

    def add_routes(self, app: web.Application) -> None:
        """Register the install routes."""
        app.router.add_get(INSTALL_PATH, self.handle_install)
        app.router.add_get(REDIRECT_PATH, self.handle_redirect)

    def _redirect_uri(self, request: web.Request) -> str:
        if self._config.redirect_uri:
            return self._config.redirect_uri
        scheme = request.headers.get("X-Forwarded-Proto", request.scheme)
        return f"{scheme}://{request.host}{REDIRECT_PATH}"

    def _page(self, heading: str, detail: str, status: int) -> web.Response:
        return web.Response(
            text=_PAGE.format(
                app_name=html.escape(self._app_name),
                heading=html.escape(heading),
                detail=html.escape(detail),
            ),
            content_type="text/html",
            status=status,
        )

    async def handle_install(self, request: web.Request) -> web.Response:
        """Redirect to Slack's authorize page."""
        generator = AuthorizeUrlGenerator(
            client_id=self._config.client_id or "",
            scopes=self._config.scopes,
            redirect_uri=self._redirect_uri(request),
        )
        url = generator.generate(state="")
        logger.info("Redirecting to OAuth authorize URL")
        raise web.HTTPFound(url)

    async def handle_redirect(self, request: web.Request) -> web.Response:
        """Exchange the authorization code and store the installation."""
        error = request.query.get("error")
        if error:
            logger.warning("OAuth error from Slack: %s", error)
            return self._page("❌ Installation Failed", f"OAuth error: {error}", 400)

        code = request.query.get("code")
        if not code:
            logger.warning("OAuth callback without authorization code")
            return self._page(
                "❌ Missing Authorization Code",
                "The OAuth flow didn't complete properly.",
                400,
            )

        try:
            response = await self._oauth_client.oauth_v2_access(
                client_id=self._config.client_id or "",
                client_secret=self._config.client_secret or "",
                code=code,
                redirect_uri=self._redirect_uri(request),
            )
        except SlackApiError as e:
            code_name = slack_error_code(e) or str(e)
            logger.error("OAuth code exchange failed: %s", code_name)
            return self._page(
                "❌ Installation Failed", f"Token exchange failed: {code_name}", 400
            )

        team = response.get("team") or {}
        bot_token = response.get("access_token")
        if not team.get("id") or not bot_token:
            logger.error("OAuth response without team or bot token")
            return self._page(
                "❌ Installation Failed", "Slack did not return a bot token.", 400
            )

        scopes = tuple(
            scope for scope in (response.get("scope") or "").split(",") if scope
        )
        installation = MultiWorkspaceInstallation(
            workspace_id=team["id"],
            workspace_name=team.get("name") or team["id"],
            bot_token=bot_token,
            bot_user_id=response.get("bot_user_id"),
            scopes=scopes,
        )
        self._directory.save(installation)
        return self._page(
            f"✅ {self._app_name} Installed",
            f"{self._app_name} is now installed in {installation.workspace_name}. "
            "Invite it to a channel to start summarizing.",
            200,
        )
