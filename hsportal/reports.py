from datetime import datetime
from typing import Dict, List, Optional

from hsportal.models import AchievementRate, Database


def achievement_rates_report(
    database: Database,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[Dict]:
    """Return achievement rates created within ``[start, end]``.

    Either bound may be omitted; with neither, every row is returned.
    """
    session = database.session()
    try:
        query = session.query(AchievementRate)
        if start:
            query = query.filter(AchievementRate.created_at >= start)
        if end:
            query = query.filter(AchievementRate.created_at <= end)
        results = query.order_by(AchievementRate.created_at, AchievementRate.id).all()
        return [row.to_dict() for row in results]
    finally:
        session.close()
