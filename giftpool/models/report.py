# giftpool/models/report.py

from giftpool.models.base import CamelModel


class ReportSummary(CamelModel):
    total_participants: int
    participants_who_gifted: int
    participation_rate: float
    total_amount_gifted: int
    average_gift_amount: int
    total_gifts_count: int
