"""Shared FastAPI dependencies: stores bound to the request session, token service."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from sweetshop.core.config import Settings
from sweetshop.core.database import get_db
from sweetshop.core.security import TokenService
from sweetshop.services.credentials import CredentialStore
from sweetshop.services.inventory import InventoryStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_credential_store(db: Annotated[Session, Depends(get_db)]) -> CredentialStore:
    return CredentialStore(db)


def get_inventory_store(db: Annotated[Session, Depends(get_db)]) -> InventoryStore:
    return InventoryStore(db)
