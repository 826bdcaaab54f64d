import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from scrapeai.config import get_settings
from scrapeai.models.request import ScrapeBody
from scrapeai.models.response import ScrapeResult
from scrapeai.services.engine import ScrapingEngine
from scrapeai.services.prompts import PROMPTS

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()

engine = ScrapingEngine()


@router.post(
    "/scrape",
    response_model=ScrapeResult,
    summary="Scrape a web page",
    description=(
        "Fetches *url* and returns its content as plain text, raw HTML, or text "
        "plus structured data, depending on `config.extractMode`.  Prompts in "
        "`config.aiPrompts` are applied in order to the text.\n\n"
        "A completed scrape always answers 200; check `success` and `error` "
        "in the body to tell whether the target could be fetched."
    ),
)
@limiter.limit(get_settings().scrape_rate_limit)
async def scrape(request: Request, body: ScrapeBody) -> JSONResponse:
    config = body.config.model_dump(exclude_none=True) if body.config else {}
    config["url"] = body.url
    logger.info("Scrape request received", extra={"url": body.url})

    result = await engine.scrape(config)
    return JSONResponse(status_code=200, content=result.to_json())


@router.get("/scrape", summary="Describe the scrape endpoint")
async def scrape_info() -> dict:
    return {
        "message": "ScrapeAI engine API",
        "version": "1.0.0",
        "endpoints": {
            "POST": "/scrape - scrape a URL with optional text-enhancement prompts",
            "GET": "/scrape - this endpoint information",
        },
        "extract_modes": ["text", "html", "structured"],
        "prompts": sorted(PROMPTS),
    }
