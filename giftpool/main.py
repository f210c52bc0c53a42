# giftpool/main.py

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# every model has to be imported before create_all so its table gets built
from giftpool.db.session import engine
from giftpool.models.base import Base
from giftpool.models.user import User  # noqa: F401
from giftpool.models.campaign import Campaign  # noqa: F401
from giftpool.models.participant import CampaignParticipant  # noqa: F401
from giftpool.models.gift import Gift  # noqa: F401

from giftpool.common.errors import register_error_handlers
from giftpool.core.config import settings
from giftpool.core.logging_setup import configure_logging
from giftpool.routers import auth, campaigns, participants, gifts, reports

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # create any missing tables on startup
    Base.metadata.create_all(bind=engine)
    logger.info("giftpool API started (environment=%s)", settings.ENVIRONMENT)
    yield


app = FastAPI(title="giftpool", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CORS_ORIGIN],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["x-request-id"] = request_id
    return response


register_error_handlers(app)

API_PREFIX = "/api/v1"

app.include_router(auth.router, prefix=f"{API_PREFIX}/auth", tags=["auth"])
app.include_router(campaigns.router, prefix=f"{API_PREFIX}/campaigns", tags=["campaigns"])
app.include_router(participants.router, prefix=f"{API_PREFIX}/campaigns/{{campaign_id}}/participants", tags=["participants"])
app.include_router(gifts.router, prefix=f"{API_PREFIX}/campaigns/{{campaign_id}}/gifts", tags=["gifts"])
app.include_router(reports.router, prefix=f"{API_PREFIX}/campaigns/{{campaign_id}}/reports", tags=["reports"])


@app.get(f"{API_PREFIX}/health")
def health_check():
    return {"status": "ok"}
