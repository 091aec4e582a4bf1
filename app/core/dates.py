from datetime import date, datetime
from zoneinfo import ZoneInfo

from app.core.config import settings


def today_local() -> date:
    return datetime.now(ZoneInfo(settings.WEAR_TIMEZONE)).date()
