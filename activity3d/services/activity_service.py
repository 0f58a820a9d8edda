import logging

from activity3d.activity import Activity
from activity3d.clients.github_client import fetch_contribution_days
from activity3d.core.calendar import DateRange
from activity3d.core.calendar import validate_date_range
from activity3d.settings import Settings

logger = logging.getLogger(__name__)


def fetch_activity(
    username: str,
    date_range: DateRange,
    token: str | None = None,
    settings: Settings | None = None,
) -> Activity:
    """Fetch contributions for `username` and bucket them into an Activity.

    The range is validated before any request is made. Errors from the
    GitHub client propagate unchanged, so no partial Activity is returned.
    """

    validate_date_range(date_range)
    app_settings = settings or Settings()

    contribution_days = fetch_contribution_days(
        username=username,
        date_range=date_range,
        token=token,
        graphql_url=app_settings.github_graphql_url,
        user_agent=app_settings.user_agent,
        timeout=app_settings.request_timeout_seconds,
    )
    if contribution_days.skipped:
        logger.warning(
            "Skipped %d contribution day(s) with unparsable dates for %s",
            contribution_days.skipped,
            username,
        )

    activity = Activity.from_days(
        date_range,
        contribution_days.days,
        skipped_days=contribution_days.skipped,
    )
    logger.info(
        "Fetched %d contributions for %s over %d weeks (%s to %s)",
        activity.total,
        username,
        activity.number_of_weeks,
        date_range.start,
        date_range.end,
    )
    return activity
