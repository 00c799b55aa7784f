"""
Dépendances partagées de l'application web.

Fournit l'utilisateur authentifié (en-tête X-User-ID), l'accès au
container DI et l'enveloppe de réponse commune à toutes les routes.
"""

from typing import Annotated, Any, Optional

from fastapi import Depends, Header, HTTPException, Request
from fastapi.encoders import jsonable_encoder

from ..container import Container


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_user_id(
    x_user_id: Annotated[Optional[str], Header(alias="X-User-ID")] = None,
) -> int:
    """Identifiant de l'utilisateur authentifié, 401 si absent ou invalide."""
    if not x_user_id or not x_user_id.strip().isdigit() or int(x_user_id) <= 0:
        raise HTTPException(status_code=401, detail="authentication required")
    return int(x_user_id)


UserId = Annotated[int, Depends(get_user_id)]
AppContainer = Annotated[Container, Depends(get_container)]


def envelope(data: Any = None, message: str = "") -> dict[str, Any]:
    """Réponse de succès {success, message, data}."""
    return {"success": True, "message": message, "data": jsonable_encoder(data)}
