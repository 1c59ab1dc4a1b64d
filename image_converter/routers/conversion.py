import os
from pathlib import Path
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from starlette.concurrency import run_in_threadpool
from sqlmodel import Session, select
from slowapi import Limiter
from slowapi.util import get_remote_address
from ..codec import SUPPORTED_FORMATS
from ..core.config import settings
from ..core.database import get_session
from ..core.logging import (
    log_conversion_event,
    log_conversion_error,
    log_history_error,
    log_deletion_error,
)
from ..core.storage import get_uploads_dir, remove_file
from ..models.conversion import ConversionRecord
from ..schemas.conversion import ConversionRead, ConvertResponse, DeleteResponse, ErrorResponse
from ..services.converter import ImageConversion

# Rate limiter
limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/api")


# Largest primary key a 64-bit integer column can hold
MAX_RECORD_ID = 2**63 - 1


def get_record(session: Session, record_id: str) -> Optional[ConversionRecord]:
    '''Identifiers are opaque to clients, anything that is not a stored key simply matches nothing'''
    if not (record_id.isascii() and record_id.isdigit()):
        return None
    pk = int(record_id)
    if pk > MAX_RECORD_ID:
        return None
    return session.get(ConversionRecord, pk)


def save_record(session: Session, record: ConversionRecord) -> ConversionRecord:
    session.add(record)
    session.commit()
    return record


@router.post(
    "/convert",
    response_model=ConvertResponse,
    summary="Convert an image",
    description="Upload one image (at most 5MB) and convert it to jpeg, png or webp. The converted file is served under /uploads.",
    responses={
        200: {"description": "Image converted successfully"},
        400: {"model": ErrorResponse, "description": "Missing file, not an image, too large, or invalid target format"},
        429: {"description": "Too many conversions"},
        500: {"model": ErrorResponse, "description": "Conversion failed"},
    },
)
@limiter.limit(settings.CONVERT_RATE_LIMIT)
async def convert_image(
    request: Request,
    image: Optional[UploadFile] = File(None, description="Image file to convert"),
    targetFormat: Optional[str] = Form(None, description="Target format: jpeg, png or webp"),
    uploads_dir: Path = Depends(get_uploads_dir),
    session: Session = Depends(get_session),
):
    """
    Convert an uploaded image.

    - **image**: the source image, MIME type must start with `image/`
    - **targetFormat**: `jpeg`, `png` or `webp`

    Nothing is written unless every check passes.
    """
    if image is None or not image.filename:
        raise HTTPException(status_code=400, detail="No image file uploaded")

    if not (image.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Only images are allowed")

    content = await image.read(settings.MAX_UPLOAD_SIZE + 1)
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=400, detail="File too large")

    if targetFormat not in SUPPORTED_FORMATS:
        raise HTTPException(status_code=400, detail="Invalid target format")

    original_name = os.path.basename(image.filename)

    try:
        output_path, size = await run_in_threadpool(
            ImageConversion.run_conversion,
            original_name,
            content,
            targetFormat,
            uploads_dir,
        )

        record = ConversionRecord(
            original_name=original_name,
            converted_name=output_path.name,
            format=targetFormat,
            size=size,
        )
        await run_in_threadpool(save_record, session, record)
    except Exception as e:
        log_conversion_error(original_name, targetFormat, e)
        raise HTTPException(status_code=500, detail="Error converting image")

    log_conversion_event(original_name, output_path.name, targetFormat, size)
    return ConvertResponse(converted_image=f"/uploads/{output_path.name}")


@router.get(
    "/history",
    response_model=List[ConversionRead],
    summary="List recent conversions",
    description="Get the most recent conversion records, newest first.",
    responses={
        200: {"description": "Up to 10 conversion records"},
        500: {"model": ErrorResponse, "description": "Store failure"},
    },
)
def get_history(session: Session = Depends(get_session)):
    try:
        statement = (
            select(ConversionRecord)
            .order_by(ConversionRecord.created_at.desc(), ConversionRecord.id.desc())
            .limit(settings.HISTORY_LIMIT)
        )
        records = session.exec(statement).all()
    except Exception as e:
        log_history_error(e)
        raise HTTPException(status_code=500, detail="Error fetching history")
    return [ConversionRead.model_validate(r) for r in records]


@router.delete(
    "/images/{id}",
    response_model=DeleteResponse,
    summary="Delete a conversion",
    description="Delete a conversion record and, on a best-effort basis, its converted file.",
    responses={
        200: {"description": "Deletion successful"},
        404: {"model": ErrorResponse, "description": "Image not found"},
        500: {"model": ErrorResponse, "description": "Deletion failed"},
    },
)
def delete_image(
    id: str,
    uploads_dir: Path = Depends(get_uploads_dir),
    session: Session = Depends(get_session),
):
    """
    Delete a conversion.

    - **id**: the record identifier from the history list

    A converted file that is already gone does not fail the request.
    """
    try:
        record = get_record(session, id)
    except Exception as e:
        log_deletion_error(id, e)
        raise HTTPException(status_code=500, detail="Error deleting image")

    if not record:
        raise HTTPException(status_code=404, detail="Image not found")

    remove_file(uploads_dir / record.converted_name)

    try:
        session.delete(record)
        session.commit()
    except Exception as e:
        log_deletion_error(id, e)
        raise HTTPException(status_code=500, detail="Error deleting image")

    return DeleteResponse()
