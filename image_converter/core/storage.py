import os
import time
from pathlib import Path
from typing import Optional, Tuple

from .config import settings
from .logging import storage_logger

OUTPUT_PREFIX = "converted-"


def get_uploads_dir() -> Path:
    return Path(settings.UPLOADS_DIR).resolve()


def ensure_uploads_dir(uploads_dir: Optional[Path] = None) -> Path:
    '''Creates the uploads directory if missing'''
    uploads_dir = uploads_dir or get_uploads_dir()
    uploads_dir.mkdir(parents=True, exist_ok=True)
    return uploads_dir


def build_output_filename(target_format: str, timestamp: Optional[int] = None) -> str:
    '''Returns converted-<millisecond timestamp>.<format>'''
    if timestamp is None:
        timestamp = time.time_ns() // 1_000_000
    return f"{OUTPUT_PREFIX}{timestamp}.{target_format}"


def write_output_file(uploads_dir: Path, target_format: str, data: bytes) -> Tuple[Path, int]:
    """
    Write converted bytes under a fresh timestamp-derived name.

    The file is created exclusively; when another conversion already claimed
    the name within the same millisecond the timestamp is bumped until a free
    name is found. Returns the written path and its byte length.
    """
    timestamp = time.time_ns() // 1_000_000
    while True:
        output_path = uploads_dir / build_output_filename(target_format, timestamp)
        try:
            with open(output_path, "xb") as output_file:
                output_file.write(data)
            break
        except FileExistsError:
            timestamp += 1
    return output_path, output_path.stat().st_size


def remove_file(file_path: Path) -> bool:
    '''Best-effort removal, failure is logged and ignored'''
    try:
        os.remove(file_path)
        return True
    except FileNotFoundError:
        storage_logger.info(f"File already deleted: {file_path.name}")
    except OSError as e:
        storage_logger.warning(f"Error removing file {file_path.name}: {e}")
    return False
