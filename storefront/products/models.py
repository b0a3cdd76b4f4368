# module storefront.products.models
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.products.images import MAX_PRODUCT_IMAGES


class Product(BaseModel):
    """Produit: champs descriptifs libres (name, price, ...) + liste ordonnée d'URLs d'images."""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    images: List[str] = Field(default_factory=list, max_length=MAX_PRODUCT_IMAGES)


@dataclass
class DeleteResult:
    """Résultat d'une suppression produit: la fiche est toujours supprimée,
    failed_images liste les clés d'images restées orphelines dans le bucket."""
    id: str
    deleted_images: List[str] = field(default_factory=list)
    failed_images: List[str] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        return bool(self.failed_images)

    def to_dict(self) -> dict:
        return {
            "message": "Product deleted",
            "id": self.id,
            "deletedImages": self.deleted_images,
            "failedImages": self.failed_images,
        }
