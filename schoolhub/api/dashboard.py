from fastapi import APIRouter

from schoolhub.api.deps import CurrentPrincipal, Reporting
from schoolhub.models.report import Dashboard

router = APIRouter()


@router.get("/", response_model=Dashboard)
async def get_dashboard(principal: CurrentPrincipal, reporting: Reporting):
    """Overview statistics; pending counts and recent approvals are admin-only."""
    return await reporting.dashboard(principal)
