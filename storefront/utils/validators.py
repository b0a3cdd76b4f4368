from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator


def check_email(v: str) -> str:
    """Valide la syntaxe de l'email mais retourne la valeur telle que reçue.
    L'email sert de clé (panier, ventes): aucune normalisation (casse du domaine incluse).
    """
    try:
        validate_email(v, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"Adresse email invalide: {e}") from e
    return v


RawEmail = Annotated[str, AfterValidator(check_email)]
