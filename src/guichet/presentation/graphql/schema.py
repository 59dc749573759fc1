"""
GraphQL schema.

Root fields delegate to the Resolver found in the request context.
"""

from typing import List

import strawberry
from strawberry.types import Info

from guichet.presentation.graphql.resolver import Resolver
from guichet.presentation.graphql.types import NewTodo, Todo


def get_resolver(info: Info) -> Resolver:
    """Resolver root for the current request."""
    return info.context["resolver"]


@strawberry.type
class Query:
    @strawberry.field
    def todos(self, info: Info) -> List[Todo]:
        return get_resolver(info).todos()


@strawberry.type
class Mutation:
    @strawberry.mutation
    def create_todo(self, info: Info, input: NewTodo) -> Todo:
        return get_resolver(info).create_todo(input)


schema = strawberry.Schema(query=Query, mutation=Mutation)
