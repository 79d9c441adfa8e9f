import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from tripfit.core.clients import build_clients
from tripfit.core.config import settings
from tripfit.routers import auth as auth_router
from tripfit.routers import health, outfits, profile, recommendation, users, wardrobe, weather

logger = logging.getLogger("tripfit.requests")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Outbound clients live on the app, not at module scope
    app.state.clients = build_clients(settings)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# CORS
origins = settings.cors_origin_list
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

prefix = settings.API_PREFIX
app.include_router(health.router, prefix=prefix)
app.include_router(auth_router.router, prefix=prefix)
app.include_router(users.router, prefix=prefix)
app.include_router(profile.router, prefix=prefix)
app.include_router(wardrobe.router, prefix=prefix)
app.include_router(outfits.router, prefix=prefix)
app.include_router(weather.router, prefix=prefix)
app.include_router(recommendation.router, prefix=prefix)


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    errors = [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]
    return JSONResponse(status_code=400, content={"detail": "invalid_request", "errors": errors})


@app.exception_handler(SQLAlchemyError)
async def persistence_error(request: Request, exc: SQLAlchemyError):
    logging.getLogger("uvicorn.error").error("persistence error path=%s err=%s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": f"persistence_error: {exc}"})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, duration_ms)
    return response


@app.get("/")
async def root():
    return {"name": settings.APP_NAME, "env": settings.APP_ENV}
