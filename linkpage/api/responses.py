from http import HTTPStatus

from fastapi.responses import Response

from linkpage.components.cache import error_headers


def plain_error(status_code: int) -> Response:
    """Generic error body. Never says why (reserved vs unknown, missing template...)."""
    return Response(
        content=HTTPStatus(status_code).phrase,
        status_code=status_code,
        headers=error_headers(),
    )
