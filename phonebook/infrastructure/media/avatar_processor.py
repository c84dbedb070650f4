from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from phonebook.application.ports.avatar_processor_port import AvatarProcessorPort
from phonebook.domain.exceptions import AvatarInputError


logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg": "JPEG", ".jpeg": "JPEG", ".png": "PNG", ".gif": "GIF", ".webp": "WEBP"}


@dataclass(frozen=True)
class AvatarProcessorSettings:
    avatars_dir: Path
    size_px: int
    max_bytes: int
    public_prefix: str = "/avatars"


class PillowAvatarProcessor(AvatarProcessorPort):
    def __init__(self, settings: AvatarProcessorSettings):
        self._settings = settings

    def process(self, *, content: bytes, filename: str, user_id: str) -> str:
        settings = self._settings
        if len(content) > settings.max_bytes:
            raise AvatarInputError(f"Avatar must be at most {settings.max_bytes} bytes.")

        ext = Path(filename or "").suffix.lower()
        image_format = ALLOWED_EXTENSIONS.get(ext)
        if image_format is None:
            raise AvatarInputError(f"Avatar extension must be one of: {', '.join(sorted(ALLOWED_EXTENSIONS))}.")

        try:
            with Image.open(io.BytesIO(content)) as image:
                image.load()
                resized = image.resize((settings.size_px, settings.size_px))
        except (UnidentifiedImageError, OSError) as exc:
            raise AvatarInputError("Avatar is not a valid image.") from exc

        if image_format == "JPEG" and resized.mode not in ("RGB", "L"):
            resized = resized.convert("RGB")

        settings.avatars_dir.mkdir(parents=True, exist_ok=True)
        target_name = f"{user_id}{ext}"
        resized.save(settings.avatars_dir / target_name, format=image_format)
        logger.info("avatar_processor: saved user_id=%s file=%s", user_id, target_name)
        return f"{settings.public_prefix}/{target_name}"
