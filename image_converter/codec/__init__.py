"""
codec - image decode/re-encode adapter

Wraps Pillow behind a small interface: raw bytes in, bytes of the target
format out. Supported targets are jpeg, png and webp.
"""

from .codec import ImageCodec, EncodedImage, CodecError, convert_image

SUPPORTED_FORMATS = ImageCodec.supported_formats()

__all__ = ['ImageCodec', 'EncodedImage', 'CodecError', 'convert_image', 'SUPPORTED_FORMATS']
