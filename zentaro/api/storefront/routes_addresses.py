from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from logging_config import logger
from zentaro.core.exceptions import AddressNotFoundException
from zentaro.domain.entities import Address, AddressCreate, AuthUser

from .common import AddressCreatedResponse, get_address_repo, get_current_user, get_settings

router = APIRouter(prefix="/addresses", tags=["addresses"])


@router.get("", response_model=list[Address])
def list_addresses(
    user: AuthUser = Depends(get_current_user),
    addresses=Depends(get_address_repo),
):
    """All addresses of the caller, newest first."""
    return addresses.list_addresses(user.id)


@router.post("", response_model=AddressCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_address(
    payload: dict[str, Any] = Body(...),
    user: AuthUser = Depends(get_current_user),
    addresses=Depends(get_address_repo),
    settings=Depends(get_settings),
):
    fields = {"country": settings.supported_country, **payload}
    if not fields.get("country"):
        fields["country"] = settings.supported_country
    data = AddressCreate.parse(fields)
    address = addresses.create_address(user.id, data.model_dump())
    logger.info(f"API: address {address.id} created for user {user.id}")
    return AddressCreatedResponse(address=address)


@router.delete("/{address_id}")
def delete_address(
    address_id: str,
    user: AuthUser = Depends(get_current_user),
    addresses=Depends(get_address_repo),
):
    if not addresses.delete_address(address_id, user.id):
        raise AddressNotFoundException(address_id)
    return {"message": "Address deleted."}
