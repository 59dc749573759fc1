"""
GraphQL execution route.
"""

from typing import Optional

from strawberry.fastapi import GraphQLRouter

from guichet.presentation.graphql import Resolver, schema


def create_graphql_router(
    path: str = "/query",
    resolver: Optional[Resolver] = None,
) -> GraphQLRouter:
    """
    Create router executing GraphQL operations.

    Accepts queries over GET and POST. The interactive IDE is served
    separately by the playground route.

    Args:
        path: Endpoint path
        resolver: Resolver root shared by all requests

    Returns:
        GraphQL router mounted at path
    """
    resolver = resolver or Resolver()

    async def get_context() -> dict:
        return {"resolver": resolver}

    return GraphQLRouter(
        schema,
        path=path,
        graphql_ide=None,
        context_getter=get_context,
    )
