import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from app.config import settings, validate_settings, configure_logging
from app.api.keys import router as keys_router
from app.mcp.tools import mcp
from app.middleware.rate_limit import RateLimitMiddleware, RateLimiter

logger = logging.getLogger(__name__)

# path="/" ensures the endpoint is at the mount point, not /mcp/mcp
mcp_app = mcp.http_app(path="/")


@asynccontextmanager
async def lifespan(app: FastAPI):
    validate_settings(settings)
    configure_logging(settings.log_level)
    logger.info(
        "Key generator starting (default tier %s, history limit %d)",
        settings.default_tier, settings.history_limit,
    )
    # Run FastMCP's lifespan for proper initialization
    async with mcp_app.lifespan(app):
        yield


app = FastAPI(
    title="Domain API Key Generator",
    description="Generates domain-bound API keys in standard and high security tiers",
    version="0.1.0",
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

generate_limiter = RateLimiter(max_requests=settings.generate_rate_limit, window_seconds=60)
api_limiter = RateLimiter(max_requests=settings.api_rate_limit, window_seconds=60)

app.add_middleware(
    RateLimitMiddleware,
    generate_limiter=generate_limiter,
    api_limiter=api_limiter,
    trust_proxy_headers=settings.trust_proxy_headers,
)

app.include_router(keys_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# Must be after other routes since mount() catches all sub-paths
app.mount("/mcp", mcp_app)
