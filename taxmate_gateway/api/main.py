"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from taxmate_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from taxmate_gateway.api.v1 import records, profile, snapshot, returns
from taxmate_gateway.domain.engine import compute_snapshot
from taxmate_gateway.domain.exceptions import InvalidRecordError, NoRealizedGainsError, NoRecordsError
from taxmate_gateway.domain.scoring import determine_risk_band
from taxmate_gateway.infrastructure.database.change_feed import RecordChangeFeed, RecordsChanged
from taxmate_gateway.infrastructure.database.models import Base
from taxmate_gateway.infrastructure.database.session import engine
from taxmate_gateway.infrastructure.observability.logging import setup_logging
from taxmate_gateway.infrastructure.observability.metrics import record_snapshot
from taxmate_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def recompute_on_change(event: RecordsChanged) -> None:
    """Re-run the engine for every pushed change and record the outcome"""
    result = compute_snapshot(event.records, event.business_type)
    record_snapshot(result, event.business_type.value, determine_risk_band(result.risk_score))
    logging.info(
        "Snapshot refreshed",
        extra={
            "user_id": event.user_id,
            "step": "snapshot_refresh",
            "record_count": len(event.records),
            "risk_score": result.risk_score,
        },
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # No migration tooling; the schema is created from the ORM models
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="TaxMate Gateway",
        description="Tax liability and audit-risk computation service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.change_feed = RecordChangeFeed()
    app.state.change_feed.subscribe(recompute_on_change)

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(InvalidRecordError)
    async def invalid_record_handler(request: Request, exc: InvalidRecordError):
        logging.warning(f"Invalid record: {exc}", extra={"request_id": getattr(request.state, "request_id", None)})
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "record_id": str(exc.record_id), "field": exc.field},
        )

    @app.exception_handler(NoRecordsError)
    @app.exception_handler(NoRealizedGainsError)
    async def nothing_to_report_handler(request: Request, exc: Exception):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(records.router, prefix="/v1", tags=["records"])
    app.include_router(profile.router, prefix="/v1", tags=["profile"])
    app.include_router(snapshot.router, prefix="/v1", tags=["snapshot"])
    app.include_router(returns.router, prefix="/v1", tags=["returns"])

    return app


app = create_app()
