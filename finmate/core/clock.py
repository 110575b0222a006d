from datetime import date, datetime, time

from finmate.config import settings


def today() -> date:
    return settings.FROZEN_TODAY or date.today()


def now() -> datetime:
    if settings.FROZEN_TODAY:
        return datetime.combine(settings.FROZEN_TODAY, time(12, 0))
    return datetime.now()
