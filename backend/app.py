from __future__ import annotations
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import List, Optional
import logging

from config import Settings
from schemas import CatalogEntry, ChatRequest, ChatResponse, ErrorResponse
from services.catalog_loader import CatalogLoader, CatalogUnavailable
from services.currency import CurrencyConverter
from services.product_finder import ProductFinder
from agent.agent import QueryOrchestrator
from agent.openai_client import CompletionGateway, ProviderFailure
from agent.tools import ToolDispatcher

logger = logging.getLogger(__name__)


def build_orchestrator(settings: Settings, catalog: CatalogLoader) -> QueryOrchestrator:
    gateway = CompletionGateway(
        api_key=settings.openai_api_key, model=settings.openai_model, timeout=settings.openai_timeout,
    )
    converter = CurrencyConverter(
        api_key=settings.exchange_api_key, base_url=settings.exchange_api_url, timeout=settings.exchange_timeout,
    )
    dispatcher = ToolDispatcher(finder=ProductFinder(catalog), converter=converter)
    return QueryOrchestrator(gateway, dispatcher, max_steps=settings.max_function_steps)


def create_app(settings: Optional[Settings] = None,
               orchestrator: Optional[QueryOrchestrator] = None) -> FastAPI:
    # Bootstrap: raises ConfigError before the server accepts any request
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    catalog = CatalogLoader(settings.catalog_path)
    agent = orchestrator or build_orchestrator(settings, catalog)

    app = FastAPI(title="Commerce Chat Agent")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"], allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"]
    )

    @app.exception_handler(ProviderFailure)
    async def _provider_failure(req: Request, exc: ProviderFailure):
        logger.error("Completion provider failed for %s: %s", req.url.path, exc, exc_info=True)
        body = ErrorResponse(error="completion_provider_failure", detail=str(exc))
        return JSONResponse(body.model_dump(), status_code=502)

    @app.exception_handler(CatalogUnavailable)
    async def _catalog_unavailable(req: Request, exc: CatalogUnavailable):
        logger.error("Catalog unavailable for %s: %s", req.url.path, exc)
        body = ErrorResponse(error="catalog_unavailable", detail=str(exc))
        return JSONResponse(body.model_dump(), status_code=503)

    @app.get("/api/health")
    def health():
        return {"ok": True, "model": settings.openai_model}

    @app.get("/api/catalog", response_model=List[CatalogEntry])
    def get_catalog():
        return catalog.entries()

    @app.post("/api/chat", response_model=ChatResponse)
    async def chat(body: ChatRequest):
        outcome = await agent.answer(body.query.strip())
        logger.info("Answered query after %d function call(s)", outcome.steps)
        return ChatResponse(reply=outcome.reply)

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
