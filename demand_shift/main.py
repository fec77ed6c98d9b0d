import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from demand_shift.api.routes import router
from demand_shift.core.config import ENABLE_SCHEDULER, LOG_LEVEL
from demand_shift.tasks import scheduler

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if ENABLE_SCHEDULER:
        scheduler.start()
    yield
    if ENABLE_SCHEDULER:
        scheduler.stop()


app = FastAPI(title="Demand Shift API", lifespan=lifespan)

# Configure allowed origins via FRONTEND_ORIGINS env var (comma-separated).
# Example: FRONTEND_ORIGINS="http://localhost:8081,http://10.0.2.2:8081"
raw = os.environ.get("FRONTEND_ORIGINS", "http://localhost:8081,http://localhost:8000")
origins = [o.strip() for o in raw.split(",") if o.strip()]

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
