"""Application entry point."""

import asyncio
import logging
import os
import signal
import sys
from dataclasses import dataclass
from pathlib import Path

from slack_bolt.async_app import AsyncApp

from paper.application.handlers import (
    BootstrapEventHandler,
    CleanupEventHandler,
    FlushEventHandler,
    StaleSweepEventHandler,
)
from paper.application.services import (
    BatchScheduler,
    BootstrapImporter,
    CanvasSynchronizer,
    ChannelStateStore,
    SummaryService,
)
from paper.application.use_cases import (
    BotJoinedChannelUseCase,
    HandleMentionUseCase,
    IngestMessageUseCase,
    UninstallWorkspaceUseCase,
)
from paper.config import Config, ConfigError, LoggingConfig, SlackMode, load_config
from paper.domain.entities import EventType, SingleWorkspaceInstallation
from paper.domain.services import WorkspaceDirectory
from paper.infrastructure.events import (
    EventDispatcher,
    EventLoop,
    EventQueue,
    EventScheduler,
)
from paper.infrastructure.http import HealthServer, OAuthInstallHandler
from paper.infrastructure.llm import LLMClient, LLMSummaryGateway
from paper.infrastructure.slack import (
    InMemoryWorkspaceDirectory,
    SlackAppRunner,
    StaticWorkspaceDirectory,
    create_slack_app,
)
from paper.presentation.slack_handlers import register_handlers

# Default logging for early startup
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "PAPER_CONFIG"


def configure_logging(config: LoggingConfig | None) -> None:
    """Configure logging based on config.

    Args:
        config: Logging configuration. If None, uses defaults.
    """
    if config is None:
        return

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    if root_logger.handlers:
        formatter = logging.Formatter(config.format)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)

    for logger_name, logger_level in (config.loggers or {}).items():
        logging.getLogger(logger_name).setLevel(
            getattr(logging, logger_level.upper(), logging.INFO)
        )
        logger.debug("Set logger '%s' to level %s", logger_name, logger_level.upper())


@dataclass
class Application:
    """Wired application components."""

    app: AsyncApp
    directory: WorkspaceDirectory
    store: ChannelStateStore
    queue: EventQueue
    event_loop: EventLoop
    event_scheduler: EventScheduler
    runner: SlackAppRunner
    http_server: HealthServer | None


def build_application(config: Config) -> Application:
    """Create and connect all components.

    Args:
        config: Application settings.

    Returns:
        The wired application, not yet started.
    """
    directory: WorkspaceDirectory
    oauth: OAuthInstallHandler | None = None
    if config.slack.mode is SlackMode.SINGLE:
        directory = StaticWorkspaceDirectory(
            SingleWorkspaceInstallation(bot_token=config.slack.bot_token or "")
        )
        app = create_slack_app(config.slack)
    else:
        multi_directory = InMemoryWorkspaceDirectory()
        directory = multi_directory
        app = create_slack_app(config.slack, multi_directory)
        oauth = OAuthInstallHandler(
            config.slack, multi_directory, app_name=config.canvas.app_name
        )

    store = ChannelStateStore(
        buffer_cap=config.batch.buffer_cap,
        idle_eviction_seconds=config.batch.idle_eviction_seconds,
    )
    queue = EventQueue()
    scheduler = BatchScheduler(store, queue, config.batch)

    llm_client = LLMClient(config.llm["default"])
    title_config = config.llm.get("title")
    gateway = LLMSummaryGateway(
        llm_client, LLMClient(title_config) if title_config else None
    )
    summary_service = SummaryService(gateway, config.canvas, clock=store.now)
    synchronizer = CanvasSynchronizer(
        store, directory, summary_service, config.canvas, scheduler=scheduler
    )
    bootstrapper = BootstrapImporter(store, synchronizer, config.bootstrap)

    dispatcher = EventDispatcher()
    for handler in (
        FlushEventHandler(store, synchronizer),
        BootstrapEventHandler(bootstrapper),
        StaleSweepEventHandler(scheduler),
        CleanupEventHandler(store),
    ):
        dispatcher.register_handler(handler.handle)

    register_handlers(
        app,
        IngestMessageUseCase(store, scheduler, queue, directory),
        HandleMentionUseCase(
            store,
            directory,
            synchronizer,
            bootstrapper,
            config.canvas,
            install_url=config.slack.install_url,
        ),
        BotJoinedChannelUseCase(bootstrapper, queue, directory),
        UninstallWorkspaceUseCase(directory, store),
    )

    event_loop = EventLoop(queue, dispatcher)
    event_scheduler = EventScheduler(
        queue,
        {
            EventType.STALE_SWEEP: config.batch.stale_sweep_interval_seconds,
            EventType.CLEANUP: config.batch.cleanup_interval_seconds,
        },
    )
    runner = SlackAppRunner(app, config.slack.app_token)

    http_server = None
    if config.http.enabled:
        http_server = HealthServer(
            config,
            event_loop,
            event_scheduler,
            runner,
            directory,
            store,
            oauth=oauth,
            port=config.http.port,
        )

    return Application(
        app=app,
        directory=directory,
        store=store,
        queue=queue,
        event_loop=event_loop,
        event_scheduler=event_scheduler,
        runner=runner,
        http_server=http_server,
    )


async def main() -> None:
    """Start the application and run until a shutdown signal arrives."""
    config_path = Path(os.environ.get(CONFIG_PATH_ENV, "config.yaml"))
    if not config_path.exists():
        logger.error("%s not found", config_path)
        sys.exit(1)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error("Failed to load config: %s", e)
        sys.exit(1)

    configure_logging(config.logging)

    application = build_application(config)

    logger.info(
        "Starting %s (%s-workspace mode)...",
        config.canvas.app_name,
        config.slack.mode.value,
    )

    if application.http_server is not None:
        await application.http_server.start()

    event_loop_task = asyncio.create_task(application.event_loop.start())
    scheduler_task = asyncio.create_task(application.event_scheduler.start())
    runner_task = asyncio.create_task(application.runner.start())

    # Setup signal handlers for graceful shutdown
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def shutdown_handler() -> None:
        logger.info("Received shutdown signal...")
        stop_event.set()

    loop.add_signal_handler(signal.SIGINT, shutdown_handler)
    loop.add_signal_handler(signal.SIGTERM, shutdown_handler)

    await stop_event.wait()

    logger.info("Shutting down...")

    closed = await application.runner.close(timeout=5.0)
    if not closed:
        logger.warning("Runner close timed out, cancelling tasks...")

    await application.event_scheduler.stop()
    await application.event_loop.stop()

    runner_task.cancel()
    await asyncio.gather(
        event_loop_task, scheduler_task, runner_task, return_exceptions=True
    )

    if application.http_server is not None:
        await application.http_server.stop()

    logger.info("Shutdown complete")


def run() -> None:
    """Run the async main function."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    run()
