"""
Exceptions du domaine Suasor.

Hierarchie unique d'erreurs levees par les services et les adaptateurs.
La couche web traduit chaque type en code HTTP (voir src/web/errors.py).

- NotFoundError : element, client ou liste introuvable
- PermissionDeniedError : controle de propriete ou de collaboration en echec
- UnsupportedFeatureError : capacite non supportee par le client
- InvalidArgumentError : requete mal formee (ensemble de reordonnancement, note hors bornes)
- ConflictError : version de liste obsolete (compare-and-swap)
- ProviderError : echec d'un appel vers l'API d'un fournisseur
"""

from typing import Optional


class SuasorError(Exception):
    """Erreur de base de l'application."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(SuasorError):
    """Element, client ou liste introuvable."""


class PermissionDeniedError(SuasorError):
    """L'utilisateur n'a pas les droits necessaires sur la ressource."""


class UnsupportedFeatureError(SuasorError):
    """La capacite demandee n'est pas supportee par ce client."""

    def __init__(self, message: str = "feature not supported by this media client") -> None:
        super().__init__(message)


class InvalidArgumentError(SuasorError):
    """Parametre invalide fourni par l'appelant."""


class ConflictError(SuasorError):
    """
    Modification concurrente detectee.

    Levee quand la version attendue d'une liste ne correspond plus
    a la version stockee. L'appelant doit relire la liste puis reessayer.
    """


class ProviderError(SuasorError):
    """
    Erreur remontee par un fournisseur externe (Plex, Jellyfin, TMDB...).

    Attributes:
        client_type: Type de client a l'origine de l'erreur
        status_code: Code HTTP renvoye par le fournisseur, si disponible
        original_error: Exception d'origine encapsulee
    """

    def __init__(
        self,
        message: str,
        client_type: str = "",
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        self.client_type = client_type
        self.status_code = status_code
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        base = f"[{self.client_type}] {self.message}" if self.client_type else self.message
        if self.status_code:
            base = f"{base} (HTTP {self.status_code})"
        return base
