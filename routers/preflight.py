# routers/preflight.py

from fastapi import APIRouter, Response
import logging

from routers.webhook import CORS_HEADERS

router = APIRouter()
logger = logging.getLogger(__name__)


@router.options("/{path:path}", summary="CORS Preflight", include_in_schema=False)
def preflight(path: str):
    """
    Answers browser preflight requests (e.g. through a Cloudflare tunnel) for any path.
    """
    logger.debug(f"CORS preflight for '/{path}'.")
    return Response(status_code=200, headers=CORS_HEADERS)
