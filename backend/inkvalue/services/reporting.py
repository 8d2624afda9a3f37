"""
Financial reporting over completed proposals.

Top-line totals cover every completed proposal; only the 12-bucket monthly
series is restricted to the requested calendar year. Months and years are
read in the studio's local calendar (STUDIO_TIMEZONE), not in UTC.
"""
import os
from datetime import datetime, timezone, tzinfo
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from inkvalue.models.schemas import MonthlyBucket, ProposalStatus, Report, SavedProject

STUDIO_TIMEZONE = ZoneInfo(os.getenv("STUDIO_TIMEZONE", "America/Sao_Paulo"))

MONTH_NAMES: List[str] = [
    "jan", "fev", "mar", "abr", "mai", "jun",
    "jul", "ago", "set", "out", "nov", "dez",
]


def local_date(moment: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Naive timestamps are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz or STUDIO_TIMEZONE)


def aggregate(proposals: Iterable[SavedProject], year: int, tz: Optional[tzinfo] = None) -> Report:
    completed = [p for p in proposals if p.status == ProposalStatus.COMPLETED]

    total_revenue = sum(p.final_price for p in completed)
    total_cost = sum(p.final_cost for p in completed)
    total_profit = sum(p.final_profit for p in completed)
    count = len(completed)
    average_ticket = total_revenue / count if count else 0.0
    margin_percent = (total_profit / total_revenue) * 100 if total_revenue else 0.0

    monthly = [MonthlyBucket(month=i + 1, name=MONTH_NAMES[i]) for i in range(12)]
    for p in completed:
        when = local_date(p.created_at, tz)
        if when.year != year:
            continue
        bucket = monthly[when.month - 1]
        bucket.revenue += p.final_price
        bucket.profit += p.final_profit
        bucket.cost += p.final_cost

    return Report(
        year=year,
        count=count,
        total_revenue=float(total_revenue),
        total_cost=float(total_cost),
        total_profit=float(total_profit),
        average_ticket=float(average_ticket),
        margin_percent=float(margin_percent),
        monthly=monthly,
    )
