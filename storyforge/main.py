import time
import uuid

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from storyforge.core.config import get_settings
from storyforge.core.exceptions import (
    AppError,
    app_exception_handler,
    generic_exception_handler,
    validation_exception_handler,
)
from storyforge.core.logging import bind_request, configure_logging, get_logger
from storyforge.db.init import init_db
from storyforge.db.seed import ensure_seed_data
from storyforge.routers import ai, auth, creations, credits, gallery, profile, projects, quests

settings = get_settings()
configure_logging(debug=settings.debug, env=settings.env)
log = get_logger(__name__)

app = FastAPI(
    title="StoryForge API",
    version="1.0.0",
    default_response_class=ORJSONResponse,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    bind_request(request_id, request.method, request.url.path)
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    log.info("request", status_code=response.status_code, duration_ms=round(duration_ms, 2))
    response.headers["X-Request-ID"] = request_id
    return response


app.add_exception_handler(AppError, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Routers
app.include_router(auth.router, prefix="/v1/auth", tags=["auth"])
app.include_router(profile.router, prefix="/v1/profile", tags=["profile"])
app.include_router(creations.characters_router, prefix="/v1/characters", tags=["characters"])
app.include_router(creations.environments_router, prefix="/v1/environments", tags=["environments"])
app.include_router(creations.props_router, prefix="/v1/props", tags=["props"])
app.include_router(creations.history_router, prefix="/v1/history", tags=["history"])
app.include_router(ai.router, prefix="/v1/ai", tags=["ai"])
app.include_router(credits.router, prefix="/v1/credits", tags=["credits"])
app.include_router(credits.leaderboard_router, prefix="/v1/leaderboard", tags=["credits"])
app.include_router(quests.router, prefix="/v1/quests", tags=["quests"])
app.include_router(gallery.router, prefix="/v1/gallery", tags=["gallery"])
app.include_router(projects.router, prefix="/v1/projects", tags=["projects"])


@app.on_event("startup")
async def startup():
    if settings.sentry_dsn:
        import sentry_sdk
        sentry_sdk.init(dsn=settings.sentry_dsn, environment=settings.env, traces_sample_rate=0.1)
        log.info("startup", msg="Sentry enabled")
    await init_db()
    await ensure_seed_data()
    log.info("startup", msg="DB connected")


@app.get("/health")
async def health():
    """Health check for load balancers and monitoring."""
    return {"status": "ok"}
