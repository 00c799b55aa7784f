"""
Implementation SQLModel du repository des configurations client.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from src.core.entities.client import ClientCategory, ClientConfig, ClientType
from src.core.errors import NotFoundError
from src.core.ports.repositories import IClientRepository
from src.infrastructure.persistence.models import ClientModel


class SQLModelClientRepository(IClientRepository):
    """
    Repository SQLModel pour les configurations client.

    Conversion bidirectionnelle entre ClientConfig (domaine) et
    ClientModel (persistance).
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, model: ClientModel) -> ClientConfig:
        return ClientConfig(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            client_type=ClientType(model.client_type),
            base_url=model.base_url,
            api_key=model.api_key,
            username=model.username,
            password=model.password,
            user_identifier=model.user_identifier,
            ssl=model.ssl,
            enabled=model.enabled,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _apply(self, model: ClientModel, entity: ClientConfig) -> ClientModel:
        model.user_id = entity.user_id
        model.name = entity.name
        model.client_type = entity.client_type.value
        model.category = entity.category.value
        model.base_url = entity.base_url
        model.api_key = entity.api_key
        model.username = entity.username
        model.password = entity.password
        model.user_identifier = entity.user_identifier
        model.ssl = entity.ssl
        model.enabled = entity.enabled
        return model

    def _to_model(self, entity: ClientConfig) -> ClientModel:
        model = ClientModel(
            name=entity.name,
            client_type=entity.client_type.value,
            category=entity.category.value,
        )
        return self._apply(model, entity)

    def get_by_id(self, client_id: int) -> Optional[ClientConfig]:
        model = self._session.get(ClientModel, client_id)
        if model:
            return self._to_entity(model)
        return None

    def get_by_user_id(self, user_id: int) -> list[ClientConfig]:
        statement = (
            select(ClientModel)
            .where(ClientModel.user_id == user_id)
            .order_by(ClientModel.id)
        )
        return [self._to_entity(m) for m in self._session.exec(statement).all()]

    def get_by_category(
        self, category: ClientCategory, user_id: Optional[int] = None
    ) -> list[ClientConfig]:
        statement = select(ClientModel).where(
            ClientModel.category == ClientCategory(category).value
        )
        if user_id is not None:
            statement = statement.where(ClientModel.user_id == user_id)
        statement = statement.order_by(ClientModel.id)
        return [self._to_entity(m) for m in self._session.exec(statement).all()]

    def create(self, config: ClientConfig) -> ClientConfig:
        model = self._to_model(config)
        self._session.add(model)
        self._session.commit()
        self._session.refresh(model)
        return self._to_entity(model)

    def update(self, config: ClientConfig) -> ClientConfig:
        model = self._session.get(ClientModel, config.id) if config.id else None
        if model is None:
            raise NotFoundError(f"client {config.id} not found")
        self._apply(model, config)
        model.updated_at = datetime.utcnow()
        self._session.add(model)
        self._session.commit()
        self._session.refresh(model)
        return self._to_entity(model)

    def delete(self, client_id: int) -> bool:
        model = self._session.get(ClientModel, client_id)
        if model is None:
            return False
        self._session.delete(model)
        self._session.commit()
        return True
