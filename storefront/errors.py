"""
Taxonomie des erreurs métier de la boutique.
Les repositories et services lèvent ces exceptions; la couche HTTP
(storefront.app_setup.exceptions) les traduit en codes de réponse.
"""


class StorefrontError(Exception):
    """Base de toutes les erreurs applicatives."""


class StoreUnavailable(StorefrontError):
    """Le stockage (table ou bucket) est injoignable ou rejette la requête."""


class NotFound(StorefrontError):
    """Entité demandée absente."""


class ValidationError(StorefrontError):
    """Payload invalide (ex: plus de 5 images, JSON produit illisible)."""


class PaymentProviderError(StorefrontError):
    """Stripe a rejeté l'appel (création de session, lecture des line items...)."""


class WebhookVerificationError(PaymentProviderError):
    """Signature Stripe absente/invalide ou payload illisible."""


class CustomerLookupError(StorefrontError):
    """Échec de la résolution client côté fournisseur d'identité."""


class CustomerNotFound(CustomerLookupError):
    """Aucun utilisateur ne correspond à l'email demandé."""
