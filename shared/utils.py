"""Shared utility functions for the BA Survey application.

Signature-image helpers live here. The signature pad hands over raw image
bytes (or a saved file); these helpers turn that into the self-describing
``data:image/png;base64,...`` string that ``SurveyRecord`` stores. The
document composer never decodes the string again.
"""

import base64
import io
import logging
from functools import lru_cache, wraps
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = 'data:'
SIGNATURE_MIME_TYPE = 'image/png'

# Twice the printed signature box (270 x 83 px) so the print stays sharp
SIGNATURE_MAX_WIDTH = 540
SIGNATURE_MAX_HEIGHT = 166


class CorruptedImageError(Exception):
    """Raised when image data is corrupted and cannot be processed."""
    pass


def handle_image_errors(func):
    """Decorator to handle image processing errors consistently.

    Decoding failures become CorruptedImageError; a missing file is logged and
    yields None. The decorated function should take image_path and/or
    image_data as keyword arguments for the error message.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        image_path = kwargs.get('image_path')
        image_data = kwargs.get('image_data')

        def log_and_raise(msg, exc):
            error_source = f"file '{image_path}'" if image_path else f"image data (size: {len(image_data) if image_data else 0} bytes)"
            logger.error(f"{msg} - {error_source}: {exc}")
            raise CorruptedImageError(f"{msg}: {exc}") from exc

        try:
            return func(*args, **kwargs)
        except FileNotFoundError as e:
            logger.warning(f"Signature image file not found '{image_path}': {e}")
            return None
        except UnidentifiedImageError as e:
            log_and_raise("Corrupted or unsupported image format", e)
        except OSError as e:
            log_and_raise("Corrupted image file", e)
        except ValueError as e:
            log_and_raise("Error processing image", e)

    return wrapper


def is_data_url(value):
    """Return True if value looks like a ``data:<mime>;base64,<payload>`` string."""
    if not isinstance(value, str) or not value.startswith(DATA_URL_PREFIX):
        return False
    header, sep, payload = value.partition(',')
    return bool(sep) and header.endswith(';base64') and bool(payload)


@lru_cache(maxsize=128)
def _calculate_signature_size(original_width, original_height, max_width, max_height):
    """Scale (width, height) down to fit the box, keeping the aspect ratio."""
    if original_width <= max_width and original_height <= max_height:
        return (original_width, original_height)

    ratio = min(max_width / original_width, max_height / original_height)
    return (max(1, int(original_width * ratio)), max(1, int(original_height * ratio)))


@handle_image_errors
def encode_signature_image(image_data=None, image_path=None,
                           max_width=SIGNATURE_MAX_WIDTH, max_height=SIGNATURE_MAX_HEIGHT):
    """Encode a captured signature as a PNG data URL.

    Transparent strokes are flattened onto white so the signature prints the
    same on every renderer, and the image is shrunk to fit the signature box.

    Args:
        image_data (bytes, optional): Raw image bytes from the capture surface
        image_path (str, optional): Path to an image file on disk
        max_width (int, optional): Maximum width in pixels
        max_height (int, optional): Maximum height in pixels

    Returns:
        str or None: ``data:image/png;base64,...`` string, or None when there
            is nothing to encode or the file is missing

    Raises:
        CorruptedImageError: When the image cannot be decoded.
    """
    if not image_data and not image_path:
        logger.warning("encode_signature_image called without image_data or image_path")
        return None

    if image_path:
        img = Image.open(image_path)
    else:
        img = Image.open(io.BytesIO(image_data))
    img.load()

    if img.mode in ('RGBA', 'LA', 'P'):
        rgba = img.convert('RGBA')
        background = Image.new('RGBA', rgba.size, (255, 255, 255, 255))
        img = Image.alpha_composite(background, rgba).convert('RGB')
    elif img.mode != 'RGB':
        img = img.convert('RGB')

    size = _calculate_signature_size(img.width, img.height, max_width, max_height)
    if size != img.size:
        img = img.resize(size, Image.Resampling.LANCZOS)

    buffer = io.BytesIO()
    img.save(buffer, format='PNG', optimize=True)
    payload = base64.b64encode(buffer.getvalue()).decode('ascii')
    return f"{DATA_URL_PREFIX}{SIGNATURE_MIME_TYPE};base64,{payload}"
