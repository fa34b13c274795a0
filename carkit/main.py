from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carkit.api.routers import auth, me, mileages, spendings, vehicles
from carkit.shared.config import get_settings
from carkit.shared.logging_config import configure_logging


settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title="CarKit API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allow_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(me.router)
app.include_router(vehicles.router)
app.include_router(mileages.router)
app.include_router(spendings.router)

