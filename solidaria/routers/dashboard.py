# solidaria/routers/dashboard.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from solidaria.database import get_db
from solidaria.core.auth import get_current_user
from solidaria.schemas.dashboard import DashboardStatsResponse
from solidaria.services.aggregation import dashboard_stats

router = APIRouter(prefix="/kermesses", tags=["Dashboard"])


@router.get("/{kermesse_id}/dashboard/stats", response_model=DashboardStatsResponse)
def get_dashboard_stats(
    kermesse_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return dashboard_stats(db, kermesse_id, current_user.id)
