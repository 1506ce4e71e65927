"""Helpers shared by routers: date query params and documented error responses."""
from datetime import date

from ltc_tracker.errors import MalformedInput
from ltc_tracker.schemas import ErrorBody
from ltc_tracker.utils import parse_day

# OpenAPI entries for the {"error", "code"} body rendered by main.py
ERROR_RESPONSES: dict[int | str, dict] = {
    status: {"model": ErrorBody} for status in (400, 401, 404, 409, 500)
}


def parse_day_param(raw: str | None, name: str) -> date | None:
    """Parse an optional date query param; unparsable values are a 400."""
    if raw is None or not raw.strip():
        return None
    try:
        return parse_day(raw)
    except ValueError as exc:
        raise MalformedInput(f"Invalid {name}: expected YYYY-MM-DD") from exc
