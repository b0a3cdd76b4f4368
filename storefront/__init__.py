"""Backend REST de la boutique: produits (images), panier, ventes, checkout Stripe."""
