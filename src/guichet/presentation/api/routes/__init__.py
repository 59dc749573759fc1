"""
API routes for Guichet.
"""

from typing import Mapping, Optional

from fastapi import APIRouter

from guichet.config.settings import Settings
from guichet.presentation.api.routes.playground import create_playground_router
from guichet.presentation.api.routes.query import create_graphql_router
from guichet.presentation.graphql import Resolver

PLAYGROUND_PATH = "/"


def build_route_table(
    settings: Settings,
    resolver: Optional[Resolver] = None,
) -> Mapping[str, APIRouter]:
    """
    Build the route table.

    Exactly two entries: the playground at "/" and the GraphQL
    endpoint at settings.QUERY_PATH.

    Args:
        settings: Application settings
        resolver: Resolver root for the GraphQL endpoint

    Returns:
        Path -> router mapping
    """
    return {
        PLAYGROUND_PATH: create_playground_router(
            title=settings.PLAYGROUND_TITLE,
            endpoint=settings.QUERY_PATH,
        ),
        settings.QUERY_PATH: create_graphql_router(
            path=settings.QUERY_PATH,
            resolver=resolver,
        ),
    }


__all__ = [
    "PLAYGROUND_PATH",
    "build_route_table",
    "create_graphql_router",
    "create_playground_router",
]
