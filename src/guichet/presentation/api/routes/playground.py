"""
GraphQL playground route.

Serves an interactive GraphiQL page that sends operations to the
query endpoint.
"""

import html
import json

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

GRAPHIQL_VERSION = "3"

_PLAYGROUND_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{title}</title>
    <style>
      body {{ height: 100%; margin: 0; width: 100%; overflow: hidden; }}
      #graphiql {{ height: 100vh; }}
    </style>
    <script crossorigin src="https://unpkg.com/react@18/umd/react.production.min.js"></script>
    <script crossorigin src="https://unpkg.com/react-dom@18/umd/react-dom.production.min.js"></script>
    <link rel="stylesheet" href="https://unpkg.com/graphiql@{version}/graphiql.min.css" />
  </head>
  <body>
    <div id="graphiql">Loading...</div>
    <script src="https://unpkg.com/graphiql@{version}/graphiql.min.js" type="application/javascript"></script>
    <script>
      const url = new URL({endpoint}, window.location.href).toString();
      const fetcher = GraphiQL.createFetcher({{ url: url }});
      ReactDOM.createRoot(document.getElementById("graphiql")).render(
        React.createElement(GraphiQL, {{ fetcher: fetcher }})
      );
    </script>
  </body>
</html>
"""


def render_playground(title: str, endpoint: str) -> str:
    """
    Render playground HTML.

    Args:
        title: Page title
        endpoint: Path or URL operations are sent to

    Returns:
        HTML document
    """
    return _PLAYGROUND_TEMPLATE.format(
        title=html.escape(title),
        endpoint=json.dumps(endpoint).replace("</", "<\\/"),
        version=GRAPHIQL_VERSION,
    )


def create_playground_router(title: str, endpoint: str) -> APIRouter:
    """
    Create router serving the playground at "/".

    Args:
        title: Page title
        endpoint: GraphQL endpoint the page targets

    Returns:
        Router with a single GET "/" route
    """
    router = APIRouter(tags=["GraphQL"])
    page = render_playground(title, endpoint)

    @router.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def playground() -> HTMLResponse:
        """Interactive GraphQL playground."""
        return HTMLResponse(page)

    return router
