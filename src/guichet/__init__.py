"""
Guichet - GraphQL server bootstrap.

HTTP router, request middleware chain, GraphQL endpoint and a
signal-driven graceful shutdown sequence.
"""

__version__ = "0.1.0"
