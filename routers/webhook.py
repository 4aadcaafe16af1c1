import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from dependencies import ServerContext, get_context
from models.deployment import DeploymentOutcome
from utils import is_tunnel_request, request_head_size

router = APIRouter()
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


async def read_limited_body(request: Request, max_request_bytes: int) -> bytes:
    """
    Read the request body, truncated so that request line, headers and body
    together fit in max_request_bytes - 1 bytes. Reading stops once the
    budget is exceeded, so the rest of an oversized body is never buffered.
    """
    head_size = request_head_size(request.method, request.url.path, request.headers)
    budget = max(max_request_bytes - 1 - head_size, 0)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > budget:
            break

    if len(body) > budget:
        logger.warning(f"Request exceeds {max_request_bytes} bytes. Body truncated to {budget} bytes.")
        del body[budget:]
    return bytes(body)


@router.post("/webhook", summary="GitHub Webhook Endpoint")
async def handle_webhook(request: Request, context: ServerContext = Depends(get_context)):
    if request.url.query:
        # Only the bare "/webhook" target is routed
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)

    logger.info("Webhook endpoint was called.")
    if is_tunnel_request(request.headers):
        logger.info(f"Request received through Cloudflare tunnel from {request.headers.get('cf-connecting-ip', 'unknown')}")

    body = await read_limited_body(request, context.settings.max_request_bytes)
    if not body:
        logger.warning("Webhook request has no body.")
        return PlainTextResponse(
            "Bad Request",
            status_code=status.HTTP_400_BAD_REQUEST,
            headers={"Access-Control-Allow-Origin": "*"}
        )

    # Commands block, so run the trigger in the threadpool.
    outcome = await run_in_threadpool(context.trigger.deploy, body)

    if outcome is DeploymentOutcome.SUCCESS:
        return PlainTextResponse("Deployment successful\n", status_code=status.HTTP_200_OK, headers=CORS_HEADERS)
    return PlainTextResponse(
        "Deployment failed\n",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers=CORS_HEADERS
    )
