"""
Corps de requête des routes JSON.
"""

from typing import Optional

from pydantic import BaseModel, Field

from ..core.entities.client import ClientType
from ..core.entities.lists import CollaboratorPermission
from ..services.clients import ClientRequest


class ClientBody(BaseModel):
    name: str
    client_type: ClientType
    base_url: str = ""
    api_key: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    user_identifier: Optional[str] = None
    ssl: bool = True
    enabled: bool = True

    def to_request(self) -> ClientRequest:
        return ClientRequest(**self.model_dump())


class ListBody(BaseModel):
    name: str
    description: str = ""
    is_public: bool = False
    item_ids: list[int] = Field(default_factory=list)


class ListUpdateBody(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    is_public: Optional[bool] = None


class ListItemBody(BaseModel):
    item_id: int
    position: Optional[int] = Field(default=None, ge=0)


class ReorderBody(BaseModel):
    item_ids: list[int]


class ShareBody(BaseModel):
    user_id: int
    permission: CollaboratorPermission = CollaboratorPermission.READ


class SyncBody(BaseModel):
    client_ids: list[int] = Field(min_length=1)


class ClientListBody(BaseModel):
    name: str
    description: str = ""


class ClientListItemBody(BaseModel):
    item_id: str


class ClientReorderBody(BaseModel):
    item_ids: list[str]


class ImportBody(BaseModel):
    name: Optional[str] = None


class PlayBody(BaseModel):
    media_item_id: int
    position_seconds: int = Field(default=0, ge=0)
    duration_seconds: int = Field(default=0, ge=0)
    completed: bool = False


class FavoriteBody(BaseModel):
    favorite: bool = True


class RatingBody(BaseModel):
    rating: float


class WatchlistBody(BaseModel):
    watchlist: bool = True


class DislikeBody(BaseModel):
    disliked: bool = True
