"""
GraphQL schema and resolvers.
"""

from guichet.presentation.graphql.resolver import Resolver
from guichet.presentation.graphql.schema import schema
from guichet.presentation.graphql.types import NewTodo, Todo, User

__all__ = ["NewTodo", "Resolver", "Todo", "User", "schema"]
