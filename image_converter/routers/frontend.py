from pathlib import Path
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from ..codec import SUPPORTED_FORMATS
from ..core.config import settings

BASE_DIR = Path(__file__).resolve().parent.parent

router = APIRouter()
templates = Jinja2Templates(directory=BASE_DIR / "templates")


@router.get("/", response_class=HTMLResponse)
async def home(request: Request):
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "title": settings.PROJECT_NAME,
            "formats": SUPPORTED_FORMATS,
            "max_upload_mb": settings.MAX_UPLOAD_SIZE // (1024 * 1024),
        },
    )
