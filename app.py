"""
FastAPI Application
Crowdin app: manifest, external QA check, and editor panel
"""

import os

os.environ["PYTHONIOENCODING"] = "utf-8"

from contextlib import asynccontextmanager
from typing import Any
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from platform_services import api_router
from config import settings
from Database.database import init_db
from qa import PixelWidthCalculator


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    # Resolve the default font before the first QA request
    PixelWidthCalculator(
        font_dirs=settings.FONT_DIRS,
        default_font=settings.DEFAULT_FONT,
        default_font_size=settings.DEFAULT_FONT_SIZE,
    ).preload()
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Crowdin Text Length Checker",
    version="1.0.0",
    openapi_tags=[
        {"name": "Crowdin App", "description": "Endpoints called by Crowdin"}
    ],
    lifespan=lifespan,
)

# CORS - Add middleware BEFORE including routers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
def index() -> Any:
    """Basic HTML response."""
    body = (
        "<html>"
        "<body style='padding: 10px;'>"
        f"<h1>{settings.PROJECT_NAME}</h1>"
        "<div>"
        "App descriptor: <a href='/manifest.json'>manifest.json</a>"
        "</div>"
        "<div>"
        "Check the API spec: <a href='/docs'>here</a>"
        "</div>"
        "</body>"
        "</html>"
    )
    return HTMLResponse(content=body)


@app.get("/health", include_in_schema=False)
def health_check() -> dict:
    return {"status": "ok"}
