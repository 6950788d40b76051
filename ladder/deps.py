import json

from fastapi import Request

from ladder.config import Settings
from ladder.errors import ValidationError

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def read_body(request: Request) -> dict:
    """Read a JSON object or a form body into a plain dict.

    Form values are always strings, so a form-posted score fails the numeric
    check just like a quoted JSON score.
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type in FORM_CONTENT_TYPES:
        form = await request.form()
        return dict(form.items())

    try:
        data = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Request body must be valid JSON")

    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
