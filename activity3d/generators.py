from datetime import date

from activity3d.core.calendar import DateRange
from activity3d.core.calendar import span_label
from activity3d.openscad import generate_data_source
from activity3d.services.activity_service import fetch_activity
from activity3d.settings import Settings


def generate_openscad(
    user_handle: str,
    start_date: date,
    end_date: date,
    token: str | None = None,
    static_code: str | None = None,
    settings: Settings | None = None,
) -> str:
    """Fetch a user's activity and render it as OpenSCAD source."""

    date_range = DateRange(start_date, end_date)
    activity = fetch_activity(user_handle, date_range, token=token, settings=settings)
    return generate_data_source(
        user_handle,
        span_label(date_range),
        activity.as_matrix(),
        static_code=static_code,
    )
