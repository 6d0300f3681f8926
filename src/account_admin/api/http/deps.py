"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from src.account_admin.api.http.app_data import ApplicationDependencies
from src.account_admin.core.models import Actor
from src.account_admin.core.services import (
    AccountConsistencyCoordinator,
    AccountQueryService,
    IdentityProviderClient,
)


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a database session for the request; services own the commits."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    db = app_deps.database_service.get_session()
    try:
        yield db
    finally:
        db.close()


def get_identity_provider(request: Request) -> IdentityProviderClient:
    """Get the identity provider client instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.identity_provider


def get_coordinator(
    db_session: Session = Depends(get_db_session),
    identity_provider: IdentityProviderClient = Depends(get_identity_provider),
) -> AccountConsistencyCoordinator:
    return AccountConsistencyCoordinator(db_session, identity_provider)


def get_query_service(
    db_session: Session = Depends(get_db_session),
) -> AccountQueryService:
    return AccountQueryService(db_session)


def get_current_actor(request: Request) -> Actor:
    """Return the caller resolved by the upstream authentication layer.

    Token verification happens before requests reach this service; it leaves
    the caller's local id and role on ``request.state.actor``.
    """
    actor = getattr(request.state, "actor", None)
    if actor is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    if not isinstance(actor, Actor):
        actor = Actor.model_validate(actor)
    return actor
