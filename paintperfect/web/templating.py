from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from paintperfect.core.settings import settings
from paintperfect.models.profile import Profile
from paintperfect.web.jinja_filters import FILTERS

# project_root/
#   paintperfect/
#     web/templating.py  (this file)
#   templates/
#     base.html

BASE_DIR = Path(__file__).resolve().parent.parent.parent
TEMPLATES_DIR = BASE_DIR / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters.update(FILTERS)


def render(
    request: Request,
    name: str,
    context: Optional[Dict[str, Any]] = None,
    *,
    user: Optional[Profile] = None,
    status_code: int = 200,
):
    """Render a page with the shared layout context (user, flash messages)."""
    ctx: Dict[str, Any] = {
        "app_name": settings.APP_NAME,
        "user": user,
        "msg": request.query_params.get("msg"),
        "error": request.query_params.get("error"),
    }
    ctx.update(context or {})
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)
