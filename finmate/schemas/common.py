from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import AfterValidator, Field

EntryType = Literal["income", "expense"]

Money = Annotated[Decimal, Field(gt=0, max_digits=14, decimal_places=2)]


def _to_local_naive(value: datetime) -> datetime:
    # Stored timestamps are naive server-local time
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


LocalDateTime = Annotated[datetime, AfterValidator(_to_local_naive)]
