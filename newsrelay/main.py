from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from newsrelay.api.routes import items
from newsrelay.config import settings
from newsrelay.services.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"newsrelay starting with provider={settings.search_provider} store={settings.store_backend}")
    yield


app = FastAPI(
    title="newsrelay",
    description="Niche news collection and Discord broadcast",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(items.router)


@app.get("/api/health")
async def health():
    return {
        "status": "ok",
        "service": "newsrelay",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "last_collection": items.last_collection(),
    }
