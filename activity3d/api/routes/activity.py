from datetime import date

from fastapi import APIRouter
from fastapi import HTTPException
from fastapi import Query
from fastapi import Request
from fastapi import Security
from fastapi.responses import PlainTextResponse
from fastapi.security import HTTPAuthorizationCredentials

from activity3d.activity import Activity
from activity3d.api.schemas.activity import ActivityResponse
from activity3d.core.calendar import MAX_WINDOW_DAYS
from activity3d.core.calendar import DateRange
from activity3d.core.calendar import span_label
from activity3d.core.calendar import trailing_range
from activity3d.core.errors import DomainError
from activity3d.core.errors import RemoteApiError
from activity3d.core.errors import ResponseParseError
from activity3d.core.security import bearer_scheme
from activity3d.core.security import extract_optional_bearer_token
from activity3d.openscad import generate_data_source
from activity3d.services.activity_service import fetch_activity
from activity3d.settings import Settings


router = APIRouter()


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def _resolve_range(
    settings: Settings,
    days: int | None,
    from_date: date | None,
    to_date: date | None,
) -> DateRange:
    if from_date is None and to_date is None:
        window = settings.activity_window_days if days is None else days
        return trailing_range(window)
    if from_date is None or to_date is None:
        raise HTTPException(
            status_code=400, detail="from and to must be provided together"
        )
    return DateRange(from_date, to_date)


def _load_activity(
    request: Request,
    username: str,
    credentials: HTTPAuthorizationCredentials | None,
    days: int | None,
    from_date: date | None,
    to_date: date | None,
) -> Activity:
    settings = _settings(request)
    token = extract_optional_bearer_token(credentials) or settings.github_token

    try:
        date_range = _resolve_range(settings, days, from_date, to_date)
        return fetch_activity(username, date_range, token=token, settings=settings)
    except DomainError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RemoteApiError as exc:
        if exc.status_code in {401, 403}:
            raise HTTPException(
                status_code=401, detail="GitHub token is invalid"
            ) from exc
        raise HTTPException(
            status_code=502, detail="GitHub API request failed"
        ) from exc
    except ResponseParseError as exc:
        raise HTTPException(
            status_code=502, detail="GitHub API response was invalid"
        ) from exc


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


@router.get("/activity/{username}", response_model=ActivityResponse)
def get_activity(
    request: Request,
    username: str,
    days: int | None = Query(default=None, ge=0, le=MAX_WINDOW_DAYS),
    from_date: date | None = Query(default=None, alias="from"),
    to_date: date | None = Query(default=None, alias="to"),
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
) -> ActivityResponse:
    """Return the week x weekday contribution matrix for a GitHub user."""

    activity = _load_activity(request, username, credentials, days, from_date, to_date)
    return ActivityResponse(
        username=username,
        from_date=activity.date_range.start,
        to_date=activity.date_range.end,
        weeks=activity.number_of_weeks,
        total=activity.total,
        skipped_days=activity.skipped_days,
        matrix=activity.as_matrix(),
    )


@router.get("/activity/{username}/scad", response_class=PlainTextResponse)
def get_activity_scad(
    request: Request,
    username: str,
    days: int | None = Query(default=None, ge=0, le=MAX_WINDOW_DAYS),
    from_date: date | None = Query(default=None, alias="from"),
    to_date: date | None = Query(default=None, alias="to"),
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
) -> str:
    """Return the contribution matrix as an OpenSCAD data file."""

    activity = _load_activity(request, username, credentials, days, from_date, to_date)
    return generate_data_source(
        username, span_label(activity.date_range), activity.as_matrix()
    )
