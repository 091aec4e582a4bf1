import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.db import init_db
from app.core.errors import (
    AcceptedNotAdvancedError,
    EmptyPoolError,
    InsufficientWardrobeError,
    NoCurrentOutfitError,
    NotFoundError,
    SessionExpiredError,
    SessionNotFoundError,
    StorageError,
    WearLoggingError,
)
from app.routers import health, items, recommendations
from app.routers import auth as auth_router

logger = logging.getLogger("app.requests")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    await init_db()
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
app.include_router(items.router, prefix=prefix)
app.include_router(recommendations.router, prefix=prefix)


@app.exception_handler(InsufficientWardrobeError)
async def insufficient_wardrobe_handler(_request: Request, exc: InsufficientWardrobeError):
    return JSONResponse(
        status_code=400,
        content={"detail": {"code": exc.code, "missing": exc.missing, "occasion": exc.occasion}},
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(_request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.code})


@app.exception_handler(SessionNotFoundError)
async def session_not_found_handler(_request: Request, exc: SessionNotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.code})


@app.exception_handler(SessionExpiredError)
async def session_expired_handler(_request: Request, exc: SessionExpiredError):
    return JSONResponse(status_code=410, content={"detail": exc.code})


@app.exception_handler(WearLoggingError)
async def wear_logging_handler(_request: Request, exc: WearLoggingError):
    return JSONResponse(status_code=503, content={"detail": {"code": exc.code, "failed": exc.failed}})


@app.exception_handler(NoCurrentOutfitError)
async def no_current_outfit_handler(_request: Request, exc: NoCurrentOutfitError):
    return JSONResponse(status_code=409, content={"detail": exc.code})


@app.exception_handler(AcceptedNotAdvancedError)
async def accepted_not_advanced_handler(_request: Request, exc: AcceptedNotAdvancedError):
    detail = {
        "code": exc.code,
        "outfit_id": exc.outfit_id,
        "worn": exc.worn,
        "failed": exc.failed,
        "cause": exc.cause.code,
    }
    if isinstance(exc.cause, InsufficientWardrobeError):
        detail["missing"] = exc.cause.missing
        return JSONResponse(status_code=400, content={"detail": detail})
    return JSONResponse(status_code=503, content={"detail": detail})


@app.exception_handler(StorageError)
async def storage_error_handler(_request: Request, exc: StorageError):
    logger.warning("storage error: %s", exc)
    return JSONResponse(status_code=503, content={"detail": exc.code})


@app.exception_handler(EmptyPoolError)
async def empty_pool_handler(request: Request, exc: EmptyPoolError):
    logger.error("sampler invariant broken on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "internal_error"})


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
