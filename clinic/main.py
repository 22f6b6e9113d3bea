from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
import time
import logging

from .api.v1 import appointments, auth, doctors, patients, prescriptions
from .core.config import settings
from .core.database import SessionLocal, init_db
from .core.errors import ClinicError
from .services.auth_service import ensure_admin

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
ROUTERS = {
    "authentication": auth.router,
    "doctors": doctors.router,
    "patients": patients.router,
    "appointments": appointments.router,
    "prescriptions": prescriptions.router,
}

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Clinic scheduling: doctors, patients, appointments and prescriptions",
    openapi_url=f"{API_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# TestClient sends its own host header
if not settings.TESTING:
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=["localhost", "127.0.0.1", "*.localhost"],
    )


@app.middleware("http")
async def time_request(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - started
    response.headers["X-Process-Time"] = f"{elapsed:.6f}"
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} in {elapsed:.4f}s")
    return response


def error_body(reason: str, message: str, **extra) -> dict:
    return {"error": reason, "message": message, **extra}


@app.exception_handler(ClinicError)
async def clinic_error_handler(request: Request, exc: ClinicError):
    if exc.status_code >= 500:
        logger.error(f"{exc.reason} on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.reason, exc.detail),
        headers=exc.headers,
    )


@app.exception_handler(404)
async def not_found_handler(request: Request, exc: HTTPException):
    # Status handlers take precedence over class handlers
    if isinstance(exc, ClinicError):
        return await clinic_error_handler(request, exc)
    return JSONResponse(
        status_code=404,
        content=error_body("Not Found", "No route matches this path", path=request.url.path),
    )


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content=error_body("Internal Server Error", "An unexpected error occurred"),
    )


for router in ROUTERS.values():
    app.include_router(router, prefix=API_PREFIX)


@app.on_event("startup")
async def startup_event():
    """Create tables and seed the configured admin account."""
    backend = settings.get_database_url.split(":", 1)[0]
    logger.info(f"Starting {settings.APP_NAME} {settings.VERSION} on {backend}")

    try:
        init_db()
    except Exception:
        logger.exception("Database initialization failed")
        raise

    db = SessionLocal()
    try:
        ensure_admin(db, settings)
    finally:
        db.close()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Stopping {settings.APP_NAME}")


@app.get("/health")
async def health_check():
    return {"status": "healthy", "timestamp": time.time(), "version": settings.VERSION}


@app.get("/")
async def root():
    return {
        "message": f"{settings.APP_NAME} is running",
        "docs": "/docs",
        "health": "/health",
    }


@app.get(f"{API_PREFIX}/info")
async def api_info():
    """Service name, version and the mount point of each API group."""
    endpoints = {name: f"{API_PREFIX}{router.prefix}" for name, router in ROUTERS.items()}
    endpoints["openapi"] = app.openapi_url
    return {"name": settings.APP_NAME, "version": settings.VERSION, "endpoints": endpoints}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("clinic.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
