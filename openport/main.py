import logging

from fastapi import FastAPI

from openport.api.deps import get_settings
from openport.api.routes import router
from openport.catalog.startup import init_catalog_for_app
from openport.ticker import tickers

app = FastAPI(title="openport", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    init_catalog_for_app()


@app.on_event("shutdown")
async def _shutdown() -> None:
    await tickers.cancel_all()


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "openport", "version": "0.1.0"}
