# main.py
import logging
from fastapi import FastAPI
from settings import settings

from api.draws import router as draws_router
from api.results import router as results_router
from services.draw import get_service

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("lottery")

app = FastAPI(title="Lottery draw service")

@app.get("/health")
def health():
    return {"ok": True}


app.include_router(draws_router)    # /draws
app.include_router(results_router)  # /results/{caller}


@app.on_event("startup")
def _build_service():
    # политика доступа и источники энтропии фиксируются при старте
    get_service()
    log.info("service ready, namespace=%s", settings.PROGRAM_ID)
