"""Input rules for creating a project. Each failure names the violated rule."""

from datetime import datetime

from config.settings import settings
from src.pv_common.datetime_utils import ensure_utc
from src.pv_common.enums import ValidationRule
from src.pv_common.errors import InputValidationError


def validate_new_project(
    title: str,
    description: str,
    end_time: datetime,
    max_points: int,
    now: datetime,
) -> tuple[str, str, datetime]:
    """Return the normalised (title, description, end_time) or raise InputValidationError."""
    title = title.strip()
    description = description.strip()
    end_time = ensure_utc(end_time)

    if not title:
        raise InputValidationError(ValidationRule.TITLE_REQUIRED, "title is required")
    if len(title) > settings.TITLE_MAX_LENGTH:
        raise InputValidationError(
            ValidationRule.TITLE_TOO_LONG,
            f"title is {len(title)} characters, max {settings.TITLE_MAX_LENGTH}",
        )
    if not description:
        raise InputValidationError(ValidationRule.DESCRIPTION_REQUIRED, "description is required")
    if len(description) > settings.DESCRIPTION_MAX_LENGTH:
        raise InputValidationError(
            ValidationRule.DESCRIPTION_TOO_LONG,
            f"description is {len(description)} characters, max {settings.DESCRIPTION_MAX_LENGTH}",
        )
    if end_time <= now:
        raise InputValidationError(
            ValidationRule.END_TIME_NOT_IN_FUTURE, "end time must be after the current time"
        )
    if isinstance(max_points, bool) or not isinstance(max_points, int) or max_points <= 0:
        raise InputValidationError(
            ValidationRule.MAX_POINTS_NOT_POSITIVE, f"max points must be > 0, got {max_points}"
        )
    return title, description, end_time
