import logging
from collections.abc import Mapping
from datetime import date
from typing import Any
from typing import NamedTuple

import httpx

from activity3d.core.calendar import DateRange
from activity3d.core.calendar import parse_day
from activity3d.core.errors import RemoteApiError
from activity3d.core.errors import ResponseParseError

logger = logging.getLogger(__name__)

DEFAULT_GRAPHQL_URL = "https://api.github.com/graphql"
DEFAULT_USER_AGENT = "activity3d"
DEFAULT_TIMEOUT_SECONDS = 20.0

CONTRIBUTIONS_QUERY = """
query($username: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $username) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        weeks {
          contributionDays {
            date
            contributionCount
          }
        }
      }
    }
  }
}
"""


class ContributionDays(NamedTuple):
    """Days with at least one contribution plus the number of unparsable dates."""

    days: list[tuple[date, int]]
    skipped: int


def build_query_variables(username: str, date_range: DateRange) -> dict[str, str]:
    """Build GraphQL variables spanning whole UTC days of the range."""

    return {
        "username": username,
        "from": f"{date_range.start.isoformat()}T00:00:00Z",
        "to": f"{date_range.end.isoformat()}T23:59:59Z",
    }


def build_headers(token: str | None, user_agent: str = DEFAULT_USER_AGENT) -> dict[str, str]:
    """Build request headers; the bearer token is only sent when provided."""

    headers = {
        "Content-Type": "application/json",
        "User-Agent": user_agent,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ResponseParseError(f"{what} is missing or not an object")
    return value


def _require_list(value: Any, what: str) -> list[Any]:
    if not isinstance(value, list):
        raise ResponseParseError(f"{what} is missing or not a list")
    return value


def extract_contribution_weeks(payload: Any) -> list[Any]:
    """Walk the GraphQL payload down to the contribution calendar weeks."""

    payload = _require_mapping(payload, "response body")

    errors = payload.get("errors")
    if errors:
        messages = [
            str(error.get("message", error)) if isinstance(error, Mapping) else str(error)
            for error in (errors if isinstance(errors, list) else [errors])
        ]
        raise ResponseParseError("GraphQL errors: " + "; ".join(messages))

    data = _require_mapping(payload.get("data"), "data")
    user = _require_mapping(data.get("user"), "data.user")
    collection = _require_mapping(
        user.get("contributionsCollection"), "contributionsCollection"
    )
    calendar = _require_mapping(
        collection.get("contributionCalendar"), "contributionCalendar"
    )
    return _require_list(calendar.get("weeks"), "contributionCalendar.weeks")


def parse_contribution_days(payload: Any, date_range: DateRange) -> ContributionDays:
    """Extract `(day, count)` pairs with a positive count inside `date_range`.

    Structural mismatches raise ResponseParseError. A day whose date string
    is not `YYYY-MM-DD` is skipped and counted instead of failing the whole
    response.
    """

    days: list[tuple[date, int]] = []
    skipped = 0

    for week in extract_contribution_weeks(payload):
        week = _require_mapping(week, "week")
        contribution_days = _require_list(
            week.get("contributionDays"), "week.contributionDays"
        )
        for item in contribution_days:
            item = _require_mapping(item, "contributionDay")
            raw_date = item.get("date")
            raw_count = item.get("contributionCount")
            if isinstance(raw_count, bool) or not isinstance(raw_count, int):
                raise ResponseParseError(
                    f"contributionCount is not an integer: {raw_count!r}"
                )
            if raw_count <= 0:
                continue

            try:
                parsed_day = parse_day(raw_date)
            except ValueError:
                skipped += 1
                logger.warning("Skipping contribution day with bad date %r", raw_date)
                continue

            if not date_range.start <= parsed_day <= date_range.end:
                continue
            days.append((parsed_day, raw_count))

    return ContributionDays(days=days, skipped=skipped)


def fetch_contribution_days(
    username: str,
    date_range: DateRange,
    token: str | None = None,
    *,
    graphql_url: str = DEFAULT_GRAPHQL_URL,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> ContributionDays:
    """Fetch daily contribution counts for a user from GitHub GraphQL API.

    Issues exactly one request. With a token, GitHub may include private
    contributions according to the user's profile settings.

    Raises:
        RemoteApiError: On transport failure, timeout or non-success status.
        ResponseParseError: If the body is not the expected JSON document.
    """

    logger.debug(
        "Requesting contributions for %s from %s to %s",
        username,
        date_range.start,
        date_range.end,
    )

    try:
        response = httpx.post(
            graphql_url,
            json={
                "query": CONTRIBUTIONS_QUERY,
                "variables": build_query_variables(username, date_range),
            },
            headers=build_headers(token, user_agent),
            timeout=timeout,
        )
    except httpx.TimeoutException as exc:
        raise RemoteApiError(f"GitHub request timed out after {timeout}s") from exc
    except httpx.HTTPError as exc:
        raise RemoteApiError(f"GitHub request failed: {exc}") from exc

    if not response.is_success:
        raise RemoteApiError(
            f"GitHub returned HTTP {response.status_code}",
            status_code=response.status_code,
            body=response.text,
        )

    try:
        payload = response.json()
    except ValueError as exc:
        raise ResponseParseError(f"invalid JSON: {exc}") from exc

    return parse_contribution_days(payload, date_range)
