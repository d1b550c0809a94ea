# sanam/main.py
import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .errors import StoreError
from .routers import admin, appointments, health, location, services

log = logging.getLogger("uvicorn.error")

app = FastAPI(
    title="Sanam Barbers API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url=None,
)

# ──────────────────────────────────────────────────────────────────────────────
# CORS (the public site and the admin console are served from elsewhere)
# ──────────────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ──────────────────────────────────────────────────────────────────────────────
# Store errors -> HTTP, message passed through verbatim for the banner
# ──────────────────────────────────────────────────────────────────────────────
@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    if exc.status_code >= 500:
        log.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        log.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/", tags=["default"])
def read_root():
    return {"ok": True, "service": "sanam-api"}


# routers
app.include_router(health.router)
app.include_router(services.router)
app.include_router(appointments.router)
app.include_router(location.router)
app.include_router(admin.router)


# ──────────────────────────────────────────────────────────────────────────────
# Local dev entrypoint
# ──────────────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=get_settings().log_level)
    uvicorn.run(
        "sanam.main:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", "8000")),
        reload=True,
    )
