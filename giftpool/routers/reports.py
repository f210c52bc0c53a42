# giftpool/routers/reports.py

from fastapi import APIRouter, Depends

from giftpool.common.deps import get_report_service, require_admin
from giftpool.models.report import ReportSummary
from giftpool.models.user import User
from giftpool.services.report_service import ReportService

router = APIRouter()


@router.get("/summary", response_model=ReportSummary)
def get_summary(
    campaign_id: str,
    admin: User = Depends(require_admin),
    service: ReportService = Depends(get_report_service),
):
    return service.summary(campaign_id)
