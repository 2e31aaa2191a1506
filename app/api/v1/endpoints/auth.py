"""Authentication proxy.

Sign-up, login, logout and session refresh are owned by the external auth
service; every ``/auth/*`` call is forwarded to it unchanged.
"""

import httpx
import structlog
from fastapi import APIRouter, Request, Response

from app.core.exceptions import ExternalServiceException
from app.dependencies import AuthHttpClient

logger = structlog.get_logger(__name__)

router = APIRouter()

# Hop-by-hop and transport headers are not forwarded in either direction
EXCLUDED_REQUEST_HEADERS = {"host", "content-length", "connection", "accept-encoding"}
EXCLUDED_RESPONSE_HEADERS = {
    "content-length",
    "content-encoding",
    "transfer-encoding",
    "connection",
    "set-cookie",
}


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    tags=["Authentication"],
    summary="Proxy to the auth service",
    include_in_schema=False,
)
async def auth_proxy(path: str, request: Request, client: AuthHttpClient) -> Response:
    """
    Forward an auth request upstream and relay the answer.

    Args:
        path: Path below ``/auth``
        request: Incoming request
        client: HTTP client bound to the auth service

    Returns:
        Upstream status, body and cookies

    Raises:
        ExternalServiceException: If the auth service cannot be reached
    """
    headers = {
        key: value
        for key, value in request.headers.items()
        if key.lower() not in EXCLUDED_REQUEST_HEADERS
    }
    if request.client:
        headers["x-forwarded-for"] = request.client.host

    try:
        upstream = await client.request(
            request.method,
            f"/auth/{path}",
            params=request.query_params,
            content=await request.body(),
            headers=headers,
        )
    except httpx.HTTPError as e:
        logger.error("auth_proxy_failed", path=path, error=str(e))
        raise ExternalServiceException("Authentication service unavailable") from e

    response = Response(
        content=upstream.content,
        status_code=upstream.status_code,
        headers={
            key: value
            for key, value in upstream.headers.items()
            if key.lower() not in EXCLUDED_RESPONSE_HEADERS
        },
    )
    for cookie in upstream.headers.get_list("set-cookie"):
        response.headers.append("set-cookie", cookie)

    logger.info("auth_proxied", path=path, method=request.method, status_code=upstream.status_code)
    return response
