from fastapi import APIRouter, Depends, Query

from versescribe.core.dates import local_today, parse_local_date
from versescribe.deps import get_current_user_id, get_store_bundle
from versescribe.services import calendar as calendar_service
from versescribe.services import credits as credits_service
from versescribe.services import progress as progress_service
from versescribe.storage.base import Stores

router = APIRouter()


@router.get("/daily-stats")
async def daily_stats(
    date: str | None = Query(None, description="YYYY-MM-DD"),
    month: str | None = Query(None, description="YYYY-MM"),
    user_id: str = Depends(get_current_user_id),
    stores: Stores = Depends(get_store_bundle),
):
    """One day (default: today's local date) or a whole month for the calendar."""
    if month and not date:
        rows = await credits_service.get_monthly_credits(stores, user_id, month)
        days = calendar_service.build_month(rows, month)
        return {
            "month": month,
            "stats": [{"date": r.date.isoformat(), "earned": r.earned, "spent": r.spent} for r in rows],
            "earned_by_date": calendar_service.earned_by_date(rows),
            "days": [
                {"date": d.date.isoformat(), "earned": d.earned, "percentage": d.percentage, "ring": d.ring.value}
                for d in days
            ],
        }
    day = parse_local_date(date) if date else local_today()
    stats = await credits_service.get_daily_credits(stores, user_id, day)
    pct = calendar_service.completion_percentage(stats.earned)
    return {
        "date": day.isoformat(),
        "stats": {"date": day.isoformat(), "earned": stats.earned, "spent": stats.spent},
        "percentage": pct,
        "ring": calendar_service.ring_color(pct).value,
        "pricing": credits_service.get_pricing(),
    }


@router.get("/completed-verses")
async def completed_verses(
    user_id: str = Depends(get_current_user_id),
    stores: Stores = Depends(get_store_bundle),
):
    keys = await progress_service.get_completed_verse_keys(stores, user_id)
    return {"completed_verses": sorted(str(k) for k in keys)}
