"""FastAPI application factory for the loan calculation engine"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from loan_engine.api.middleware import RequestIDMiddleware, MetricsMiddleware
from loan_engine.api.v1 import calculator, members
from loan_engine.infrastructure.observability.logging import setup_logging
from loan_engine.config import settings

API_VERSION = "0.1.0"

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Stateless calculators and member underwriting checks, both under /v1"""
    app = FastAPI(
        title="Cooperative Loan Calculation Engine",
        description="Amortization, penalties, repayment allocation and member eligibility",
        version=API_VERSION,
    )

    # RequestIDMiddleware is outermost so access logs carry the request ID
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name, "version": API_VERSION}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for router, tag in ((calculator.router, "calculator"), (members.router, "members")):
        app.include_router(router, prefix="/v1", tags=[tag])

    return app


app = create_app()
