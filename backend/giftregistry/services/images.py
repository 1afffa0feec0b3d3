import base64
import binascii
import logging
import uuid
from pathlib import Path

from giftregistry.core.errors import ValidationError


logger = logging.getLogger(__name__)

EXTENSIONS_BY_MIME = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
}
DEFAULT_EXTENSION = ".jpg"


def extension_for(content_type: str | None) -> str:
    if not content_type:
        return DEFAULT_EXTENSION
    return EXTENSIONS_BY_MIME.get(content_type.split(";")[0].strip().lower(), DEFAULT_EXTENSION)


def decode_data_url(data: str) -> tuple[bytes, str | None]:
    """Split ``data:<mime>;base64,<payload>`` (or a bare base64 string) into bytes and mime type."""
    content_type = None
    payload = data.strip()
    if payload.startswith("data:"):
        header, sep, payload = payload.partition(",")
        if not sep or ";base64" not in header:
            raise ValidationError("Invalid image data")
        content_type = header[len("data:"):].split(";")[0] or None

    try:
        return base64.b64decode(payload, validate=True), content_type
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("Invalid image data") from exc


class ImageStorage:
    """Stores uploaded images on the local filesystem below ``upload_dir``.

    Saved files are addressed as ``<url_prefix>/<name>`` and served by the
    static files stage.
    """

    def __init__(self, upload_dir: str | Path, url_prefix: str = "/uploads", max_size_bytes: int = 5 * 1024 * 1024):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_size_bytes = max_size_bytes

    def save(self, data: bytes | str, content_type: str | None = None) -> str:
        if isinstance(data, str):
            data, data_type = decode_data_url(data)
            content_type = content_type or data_type

        if content_type and not content_type.lower().startswith(("image/", "application/octet-stream")):
            raise ValidationError("Only images are allowed")
        if not data:
            raise ValidationError("Image is empty")
        if len(data) > self.max_size_bytes:
            raise ValidationError(
                f"File size exceeds maximum allowed size of {self.max_size_bytes // (1024 * 1024)}MB"
            )

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{uuid.uuid4()}{extension_for(content_type)}"
        (self.upload_dir / filename).write_bytes(data)
        logger.info("Image stored", extra={"image_name": filename, "size": len(data)})
        return f"{self.url_prefix}/{filename}"

    def delete(self, url: str | None) -> bool:
        if not url or not url.startswith(self.url_prefix + "/"):
            return False
        name = url[len(self.url_prefix) + 1:]
        if not name or "/" in name or name.startswith("."):
            return False

        path = self.upload_dir / name
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.info("Image deleted", extra={"image_name": name})
        return True
