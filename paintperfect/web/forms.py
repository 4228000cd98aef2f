from typing import Any, Dict, Optional
from urllib.parse import urlencode

from fastapi.responses import RedirectResponse
from starlette.datastructures import FormData, UploadFile

from paintperfect.services.storage import IncomingFile

ROOM_FIELD_PREFIX = "room__"


def room_counts_from_form(form: FormData) -> Dict[str, int]:
    """Collect `room__<Room name>` number inputs into {room: count}."""
    counts: Dict[str, int] = {}
    for key, value in form.multi_items():
        if not key.startswith(ROOM_FIELD_PREFIX) or isinstance(value, UploadFile):
            continue
        room = key[len(ROOM_FIELD_PREFIX):]
        try:
            counts[room] = max(0, int(str(value).strip() or 0))
        except ValueError:
            counts[room] = 0
    return counts


def form_str(form: FormData, name: str, default: str = "") -> str:
    value = form.get(name)
    if value is None or isinstance(value, UploadFile):
        return default
    return str(value)


async def incoming_file(value: Any) -> Optional[IncomingFile]:
    """UploadFile from a form -> IncomingFile; None when nothing was chosen."""
    if not isinstance(value, UploadFile) or not value.filename:
        return None
    data = await value.read()
    if not data:
        return None
    return IncomingFile(filename=value.filename, content_type=value.content_type, data=data)


def redirect_with(url: str, *, msg: Optional[str] = None, error: Optional[str] = None) -> RedirectResponse:
    params = {k: v for k, v in (("msg", msg), ("error", error)) if v}
    if params:
        url = f"{url}{'&' if '?' in url else '?'}{urlencode(params)}"
    return RedirectResponse(url=url, status_code=303)
