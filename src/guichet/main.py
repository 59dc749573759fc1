"""
Guichet - GraphQL server entry point.

Uses Application Factory Pattern; the process entry point owns the single
ServerProcess record and hands it to the lifecycle controller.
"""

import asyncio
import sys
from typing import Optional, Tuple

from fastapi import FastAPI

from guichet import __version__
from guichet.config.settings import Settings, get_settings
from guichet.domain.exceptions import ListenerBindError, ListenerTerminatedError
from guichet.infrastructure.monitoring import get_logger, setup_logging
from guichet.infrastructure.server import (
    EXIT_FATAL,
    LifecycleController,
    ServerProcess,
)
from guichet.infrastructure.shutdown import ShutdownManager
from guichet.presentation.api.middleware import build_middleware_chain
from guichet.presentation.api.routes import build_route_table
from guichet.presentation.graphql import Resolver

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    resolver: Optional[Resolver] = None,
) -> FastAPI:
    """
    Application factory - creates and configures FastAPI app.

    Args:
        settings: Optional Settings instance (for testing)
        resolver: Optional GraphQL resolver root

    Returns:
        Configured FastAPI application; the middleware chain and route
        table are kept on app.state
    """
    if settings is None:
        settings = get_settings()

    middleware_chain = build_middleware_chain(settings)
    route_table = build_route_table(settings, resolver=resolver)

    app = FastAPI(
        title=settings.APP_NAME,
        description="GraphQL server",
        version=__version__,
        middleware=list(middleware_chain),
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    for router in route_table.values():
        app.include_router(router)

    app.state.middleware_chain = middleware_chain
    app.state.route_table = route_table

    return app


def build_server_process(
    settings: Settings,
    resolver: Optional[Resolver] = None,
) -> Tuple[ServerProcess, FastAPI]:
    """
    Build the server process record and the application it serves.

    Args:
        settings: Application settings
        resolver: Optional GraphQL resolver root

    Returns:
        (process, app)
    """
    app = create_app(settings, resolver=resolver)
    process = ServerProcess(
        listen_address=settings.listen_address,
        middleware_chain=app.state.middleware_chain,
        route_table=app.state.route_table,
        grace_period=settings.SHUTDOWN_GRACE_PERIOD,
    )
    return process, app


async def serve(settings: Settings) -> int:
    """
    Run the server until a termination signal has been handled.

    Args:
        settings: Application settings

    Returns:
        Process exit status
    """
    process, app = build_server_process(settings)
    shutdown_manager = ShutdownManager(grace_period=process.grace_period)
    controller = LifecycleController(process, app, shutdown_manager)

    shutdown_manager.setup_signal_handlers()
    try:
        await controller.run()
    except (ListenerBindError, ListenerTerminatedError) as e:
        logger.critical("Listen failed", extra={"error": e.message})
        return EXIT_FATAL
    finally:
        shutdown_manager.restore_signal_handlers()

    logger.info("Exit", extra={"outcome": process.shutdown_outcome.value})
    return process.exit_code


def main() -> None:
    """
    Main entry point for Guichet.

    Loads configuration, configures logging and serves until SIGINT or
    SIGTERM.
    """
    settings = get_settings()
    setup_logging(level=settings.LOG_LEVEL, json_logs=settings.json_logs)

    exit_code = asyncio.run(serve(settings))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
