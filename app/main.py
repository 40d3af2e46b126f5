from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from app.api.daily_reports import router as daily_reports_router
from app.api.feedback import router as feedback_router
from app.api.performance import router as performance_router
from app.api.targets import router as targets_router
from app.errors import register_error_handlers
from app.logging import configure_logging

app = FastAPI(title="hr_portal API")

configure_logging()
register_error_handlers(app)


def _include_api_router(router, dependencies=None):
    app.include_router(router, dependencies=dependencies)
    app.include_router(router, prefix="/api/v1", dependencies=dependencies)


_include_api_router(targets_router)
_include_api_router(feedback_router)
_include_api_router(daily_reports_router)
_include_api_router(performance_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.head("/health")
def head_health():
    return Response(status_code=200)


@app.get("/metrics")
def metrics():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
