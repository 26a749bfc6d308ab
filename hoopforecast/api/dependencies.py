"""FastAPI dependencies."""
from fastapi import Request

from hoopforecast.services.forecast.orchestrator import ReconciliationOrchestrator


def get_orchestrator(request: Request) -> ReconciliationOrchestrator:
    """Dependency to get the orchestrator built in the application lifespan."""
    return request.app.state.orchestrator
