"""Key record API routes.

Learn: Each route receives the verified identity and a KeyService via
Depends() and delegates to the service. Routes never catch service
errors; the AppError handler in error_handlers.py renders them.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from apikey_manager.auth.dependencies import CurrentIdentity, get_current_user
from apikey_manager.db.engine import get_db
from apikey_manager.schemas.key import KeyCreate, KeyRead, KeyUpdate, MessageResponse
from apikey_manager.services.key_service import KeyService

router = APIRouter(prefix="/keys")


def _svc(db: AsyncSession = Depends(get_db)) -> KeyService:
    return KeyService(db)


@router.get("", response_model=list[KeyRead])
async def list_keys(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: KeyService = Depends(_svc),
):
    return await svc.list_keys(identity.user_id)


@router.post("", response_model=KeyRead, status_code=status.HTTP_201_CREATED)
async def create_key(
    body: KeyCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: KeyService = Depends(_svc),
):
    """Store a new key. The owner is always the caller."""
    return await svc.create_key(identity.user_id, body)


@router.put("/{key_id}", response_model=MessageResponse)
async def update_key(
    key_id: str,
    body: KeyUpdate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: KeyService = Depends(_svc),
):
    """Change name, notes, favorite, or order on one of the caller's keys."""
    await svc.update_key(identity.user_id, key_id, body.changes())
    return {"message": "Updated successfully"}


@router.delete("/{key_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_key(
    key_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: KeyService = Depends(_svc),
):
    await svc.delete_key(identity.user_id, key_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
