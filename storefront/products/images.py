"""
Adaptateur object store (Supabase Storage) pour les images produit.
- Clé d'objet = nom de fichier d'origine (pas de hash: une collision écrase l'objet existant).
- Retourne l'URL publique de chaque objet stocké.
"""
from dataclasses import dataclass
from typing import List, Sequence
from urllib.parse import unquote, urlparse
import logging

from storefront.errors import StoreUnavailable, ValidationError

logger = logging.getLogger(__name__)

MAX_PRODUCT_IMAGES = 5


@dataclass(frozen=True)
class ImageFile:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


def key_from_url(url: str) -> str:
    """Dernier segment du chemin de l'URL (décodé), utilisé comme clé d'objet."""
    path = urlparse(url or "").path
    return unquote(path.rstrip("/").rsplit("/", 1)[-1])


def check_image_count(count: int) -> None:
    # Contrôle fait avant tout upload: tout ou rien
    if count > MAX_PRODUCT_IMAGES:
        raise ValidationError(f"Too many images: {count} (max {MAX_PRODUCT_IMAGES})")


class ImageStore:
    def __init__(self, client, bucket: str):
        self._client = client
        self.bucket = bucket

    def _bucket(self):
        return self._client.storage.from_(self.bucket)

    def upload_one(self, file: ImageFile) -> str:
        key = file.filename
        if not key:
            raise ValidationError("Image filename is required")
        try:
            bucket = self._bucket()
            bucket.upload(
                path=key,
                file=file.content,
                file_options={"content-type": file.content_type, "upsert": "true"},
            )
            url = bucket.get_public_url(key)
        except Exception as e:
            logger.exception("products.images.upload_one failed key=%s", key)
            raise StoreUnavailable(f"Image upload failed: {key}") from e
        return url.rstrip("?")

    def upload_many(self, files: Sequence[ImageFile]) -> List[str]:
        check_image_count(len(files))
        return [self.upload_one(f) for f in files]

    def delete_one(self, key: str) -> None:
        """Supprime l'objet; un objet absent n'est pas une erreur (remove renvoie [])."""
        try:
            self._bucket().remove([key])
        except Exception as e:
            logger.exception("products.images.delete_one failed key=%s", key)
            raise StoreUnavailable(f"Image delete failed: {key}") from e
