"""
Resolver root for the GraphQL schema.

Holds the application's dependencies for field resolvers. No data
source is wired in; every operation reports that it is not implemented.
"""

from typing import List

from guichet.presentation.graphql.types import NewTodo, Todo


class Resolver:
    """Resolver root passed to the schema through the request context."""

    def todos(self) -> List[Todo]:
        raise NotImplementedError("not implemented")

    def create_todo(self, new_todo: NewTodo) -> Todo:
        raise NotImplementedError("not implemented")
