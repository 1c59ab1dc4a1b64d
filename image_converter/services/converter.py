import logging
from pathlib import Path
from typing import Optional, Tuple

from ..codec import convert_image
from ..core.storage import ensure_uploads_dir, write_output_file

logger = logging.getLogger(__name__)


class ImageConversion:
    def __init__(self, original_name: str, file_to_convert: bytes, target_format: str, uploads_dir: Path):
        self.original_name = original_name
        self.file_to_convert = file_to_convert
        self.target_format = target_format
        self.uploads_dir = uploads_dir

        self.output_path: Optional[Path] = None
        self.size = 0

    def create_directories(self) -> bool:
        '''Creates and checks for directories'''
        ensure_uploads_dir(self.uploads_dir)
        return True

    def run_codec(self) -> bytes:
        '''Re-encodes the upload into the target format'''
        encoded = convert_image(self.file_to_convert, self.target_format)
        logger.debug(
            f"Encoded {self.original_name} as {self.target_format}: "
            f"{encoded.width}x{encoded.height}, {encoded.size} bytes"
        )
        return encoded.data

    def convert(self) -> Tuple[Path, int]:
        '''Converts the upload and writes it out to the uploads directory'''
        self.create_directories()
        converted = self.run_codec()
        self.output_path, self.size = write_output_file(self.uploads_dir, self.target_format, converted)
        logger.info(f'Converted {self.original_name} to {self.output_path.name} ({self.size} bytes)')
        return self.output_path, self.size

    @classmethod
    def run_conversion(cls, original_name, file_to_convert, target_format, uploads_dir) -> Tuple[Path, int]:
        '''Used to execute the class'''
        converter = cls(original_name, file_to_convert, target_format, uploads_dir)
        return converter.convert()
