"""
GraphQL object and input types.
"""

import strawberry


@strawberry.type
class User:
    id: strawberry.ID
    name: str


@strawberry.type
class Todo:
    id: strawberry.ID
    text: str
    done: bool
    user: User


@strawberry.input
class NewTodo:
    text: str
    user_id: str
