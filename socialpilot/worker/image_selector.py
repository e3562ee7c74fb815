"""
Image Pool

File-backed pool of uploaded images that drafts pick their picture from.
Images live in ``<upload_dir>/images`` and are served publicly under
``<public_url>/<filename>``.

Selection is a placeholder heuristic: the first image in filename order.
"""

import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, List, Optional

from ..config import Settings
from ..errors import NotFoundError, ValidationError
from ..logging_config import pipeline_logger

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


@dataclass
class ImageAsset:
    """An image in the pool"""
    filename: str
    path: str
    url: str

    def to_dict(self) -> Dict:
        return asdict(self)


class ImageStore:
    """List, select, store and inspect pool images"""

    def __init__(self, upload_dir: str, public_url: str = "/uploads/images"):
        self.images_dir = Path(upload_dir) / "images"
        self.public_url = public_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImageStore":
        return cls(settings.upload_dir, settings.public_upload_url)

    def _ensure_dir(self):
        self.images_dir.mkdir(parents=True, exist_ok=True)

    def _resolve(self, filename: str) -> Path:
        if not filename or os.path.basename(filename) != filename or filename in (".", ".."):
            raise ValidationError(f"Invalid image filename: {filename!r}")
        return self.images_dir / filename

    def _asset(self, path: Path) -> ImageAsset:
        return ImageAsset(
            filename=path.name,
            path=str(path),
            url=f"{self.public_url}/{path.name}",
        )

    def list_images(self) -> List[ImageAsset]:
        """Images in the pool, sorted by filename."""
        self._ensure_dir()
        files = sorted(
            p for p in self.images_dir.iterdir()
            if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
        )
        return [self._asset(p) for p in files]

    def select_image_for_caption(self, caption: str, hashtags: Optional[List[str]] = None) -> Optional[ImageAsset]:
        """Pick an image for a caption, or None when the pool is empty."""
        images = self.list_images()
        if not images:
            pipeline_logger.info("Image pool is empty, draft will have no image")
            return None
        return images[0]

    def save_image(self, filename: str, data: bytes) -> ImageAsset:
        path = self._resolve(filename)
        if path.suffix.lower() not in IMAGE_EXTENSIONS:
            raise ValidationError(f"Unsupported image type: {path.suffix or filename}")
        self._ensure_dir()
        path.write_bytes(data)
        return self._asset(path)

    def delete_image(self, filename: str) -> None:
        path = self._resolve(filename)
        if not path.is_file():
            raise NotFoundError(f"Image '{filename}' not found")
        path.unlink()
        pipeline_logger.info("Image deleted", filename=filename)

    def get_metadata(self, filename: str) -> Dict:
        from PIL import Image, UnidentifiedImageError

        path = self._resolve(filename)
        if not path.is_file():
            raise NotFoundError(f"Image '{filename}' not found")

        try:
            with Image.open(path) as img:
                width, height = img.size
                image_format = (img.format or "").lower()
        except UnidentifiedImageError as e:
            raise ValidationError(f"'{filename}' is not a readable image") from e

        return {
            "filename": filename,
            "width": width,
            "height": height,
            "format": image_format,
            "size": path.stat().st_size,
        }
