"""FastAPI front end for Quotegen."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from .health import VERSION
from .health import router as health_router
from .logging_config import LoggingMiddleware, setup_logging
from .metrics import router as metrics_router
from .openrouter import (
    FetchCancelledError,
    HTTPError,
    OpenRouterClient,
    TransportError,
)
from .settings import get_settings
from .startup import new_openrouter_client, validate_startup
from .tags import VALID_TAGS

# Setup logging
settings = get_settings()
setup_logging(level=settings.log_level, format_type=settings.log_format)
logger = logging.getLogger(__name__)

MAX_TAG_LENGTH = 50


@asynccontextmanager
async def lifespan(app: FastAPI):
    current = get_settings()
    app.state.client = None

    if validate_startup(current):
        app.state.client = new_openrouter_client(current)
    else:
        logger.warning("OpenRouter client not configured; /api/v1/quote will return 503")

    yield

    if app.state.client is not None:
        await app.state.client.close()


app = FastAPI(
    title="Quotegen API",
    version=VERSION,
    description="Quotes by emotion, fetched through OpenRouter",
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)
app.include_router(health_router)
app.include_router(metrics_router)


class QuoteRequest(BaseModel):
    """Request for a quote."""
    tag: str = Field(min_length=1, max_length=MAX_TAG_LENGTH)


class QuoteResponse(BaseModel):
    """A generated quote."""
    tag: str
    quote: str
    author: str
    source: str
    model: str
    latency_ms: int
    created_at: datetime


class TagsResponse(BaseModel):
    """Preset tags."""
    tags: List[str]


def get_client(request: Request) -> OpenRouterClient:
    """Dependency returning the shared OpenRouter client."""
    client = getattr(request.app.state, "client", None)
    if client is None:
        raise HTTPException(status_code=503, detail="OpenRouter is not configured")
    return client


@app.get("/")
async def root():
    """Root endpoint."""
    return {"status": "ok", "service": "Quotegen API"}


@app.get("/api/v1/tags", response_model=TagsResponse)
async def list_tags():
    """List the preset tags."""
    return TagsResponse(tags=list(VALID_TAGS))


@app.post("/api/v1/quote", response_model=QuoteResponse)
async def create_quote(
    body: QuoteRequest,
    client: OpenRouterClient = Depends(get_client),
):
    """Fetch a quote for a preset or custom tag."""
    try:
        quote = await client.fetch_quote(body.tag)
    except FetchCancelledError as e:
        raise HTTPException(status_code=504, detail=str(e))
    except (HTTPError, TransportError) as e:
        logger.error(f"Quote fetch failed for tag '{body.tag}': {e}")
        raise HTTPException(status_code=502, detail=str(e))

    logger.info(
        f"Quote fetched: tag={quote.tag}, source={quote.source}, latency_ms={quote.latency_ms}"
    )
    return QuoteResponse(**quote.to_dict())


def run():
    """Console entry point."""
    import uvicorn

    current = get_settings()
    uvicorn.run(app, host=current.host, port=current.port)


if __name__ == "__main__":
    run()
