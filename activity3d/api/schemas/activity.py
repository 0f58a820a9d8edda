from datetime import date

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class ActivityResponse(BaseModel):
    """Dense contribution matrix for one user and date range."""

    model_config = ConfigDict(populate_by_name=True)

    username: str
    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")
    weeks: int
    total: int
    skipped_days: int
    matrix: list[list[int]]
