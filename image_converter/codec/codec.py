from dataclasses import dataclass
from io import BytesIO
from typing import Dict, Tuple

from PIL import Image, UnidentifiedImageError


class CodecError(Exception):
    """Raised when an image cannot be decoded or re-encoded."""


@dataclass
class EncodedImage:
    """Result of a conversion: encoded bytes plus basic image info."""
    data: bytes
    format: str
    width: int
    height: int

    @property
    def size(self) -> int:
        return len(self.data)


class ImageCodec:
    """
    Decodes raw image bytes and re-encodes them into a target format.

    This class is a thin adapter over Pillow. Format names are the lowercase
    names accepted by the HTTP API (jpeg, png, webp); they are mapped to
    Pillow's encoder names, and the colour mode of the decoded image is
    adjusted when the target encoder cannot store it.
    """
    PILLOW_FORMATS: Dict[str, str] = {
        "jpeg": "JPEG",
        "png": "PNG",
        "webp": "WEBP",
    }

    # Modes each encoder can write without conversion
    NATIVE_MODES: Dict[str, Tuple[str, ...]] = {
        "jpeg": ("RGB", "L", "CMYK"),
        "png": ("RGB", "RGBA", "L", "LA", "P", "1", "I", "I;16"),
        "webp": ("RGB", "RGBA"),
    }

    BACKGROUND = (255, 255, 255)

    def __init__(self, target_format: str):
        """
        Initialize the ImageCodec.

        Args:
            target_format: One of the supported lowercase format names.

        Raises:
            ValueError: If the target format is not supported.
        """
        if target_format not in self.PILLOW_FORMATS:
            raise ValueError(f"Unsupported target format: {target_format}")
        self.target_format = target_format

    @classmethod
    def supported_formats(cls) -> Tuple[str, ...]:
        return tuple(cls.PILLOW_FORMATS)

    def decode(self, data: bytes) -> Image.Image:
        """
        Decode raw bytes into a Pillow image.

        Args:
            data: Raw bytes of the source image.

        Returns:
            The fully loaded image.

        Raises:
            CodecError: If the bytes are not a readable image.
        """
        try:
            image = Image.open(BytesIO(data))
            image.load()
        except UnidentifiedImageError as e:
            raise CodecError(f"Cannot identify image file: {e}") from e
        except (OSError, ValueError, SyntaxError, EOFError, Image.DecompressionBombError) as e:
            raise CodecError(f"Failed to decode image: {e}") from e
        return image

    def prepare(self, image: Image.Image) -> Image.Image:
        """
        Convert the image mode to one the target encoder accepts.

        Transparent images are flattened onto a white background when the
        target has no alpha channel.
        """
        if image.mode in self.NATIVE_MODES[self.target_format]:
            return image

        has_alpha = image.mode in ("RGBA", "LA", "PA") or (
            image.mode == "P" and "transparency" in image.info
        )
        if has_alpha:
            rgba = image.convert("RGBA")
            if self.target_format == "webp":
                return rgba
            flattened = Image.new("RGB", rgba.size, self.BACKGROUND)
            flattened.paste(rgba, mask=rgba.split()[-1])
            return flattened

        return image.convert("RGB")

    def encode(self, image: Image.Image) -> bytes:
        """
        Encode the image with the target format's encoder.

        Raises:
            CodecError: If the encoder fails.
        """
        output_buffer = BytesIO()
        try:
            image.save(output_buffer, format=self.PILLOW_FORMATS[self.target_format])
        except (OSError, ValueError, KeyError) as e:
            raise CodecError(f"Failed to encode image as {self.target_format}: {e}") from e
        return output_buffer.getvalue()

    def convert(self, data: bytes) -> EncodedImage:
        """
        Decode, adjust and re-encode raw image bytes.

        Args:
            data: Raw bytes of the source image.

        Returns:
            An EncodedImage with the converted bytes.
        """
        image = self.prepare(self.decode(data))
        encoded = self.encode(image)
        return EncodedImage(
            data=encoded,
            format=self.target_format,
            width=image.width,
            height=image.height,
        )


def convert_image(data: bytes, target_format: str) -> EncodedImage:
    '''Used to execute the codec in one call'''
    return ImageCodec(target_format).convert(data)
