"""
Item API endpoints following FastAPI best practices
Clean API layer with dependency injection
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from blueprint.core.errors import ErrorResponseModel, ValidationProblemModel
from blueprint.dependencies.auth import require_user_email
from blueprint.dependencies.item import get_item_service
from blueprint.models.user import User
from blueprint.schemas.item import (
    CreateItemRequest,
    ItemDetailsResponse,
    ItemsPageResponse,
    UpdateItemRequest,
)
from blueprint.services.item import ItemService

router = APIRouter()

AUTH_RESPONSES = {
    400: {"model": ValidationProblemModel},
    401: {"model": ErrorResponseModel},
}


@router.get(
    "",
    response_model=ItemsPageResponse,
    responses={400: {"model": ValidationProblemModel}, 503: {"model": ErrorResponseModel}},
)
async def get_items(
    page_number: int = Query(1, ge=1, alias="pageNumber", description="1-based page index"),
    page_size: int = Query(5, ge=1, le=100, alias="pageSize", description="Items per page"),
    name: Optional[str] = Query(None, description="Case-insensitive substring of the item name"),
    service: ItemService = Depends(get_item_service),
):
    """
    List items ordered by name, one page at a time.
    """
    return await service.list_items(page_number, page_size, name)


@router.get(
    "/{item_id}",
    response_model=ItemDetailsResponse,
    responses={404: {"model": ErrorResponseModel}},
)
async def get_item(
    item_id: UUID,
    service: ItemService = Depends(get_item_service),
):
    """
    Get an item by its ID.
    """
    return await service.get_item(item_id)


@router.post(
    "",
    response_model=ItemDetailsResponse,
    status_code=status.HTTP_201_CREATED,
    responses=AUTH_RESPONSES,
)
async def create_item(
    item: CreateItemRequest,
    response: Response,
    service: ItemService = Depends(get_item_service),
    user: User = Depends(require_user_email),
):
    """
    Create a new item attributed to the caller.
    Requires authentication.
    """
    created = await service.create_item(item, user)
    response.headers["Location"] = f"/items/{created.id}"
    return created


@router.put(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**AUTH_RESPONSES, 404: {"model": ErrorResponseModel}},
)
async def update_item(
    item_id: UUID,
    item: UpdateItemRequest,
    service: ItemService = Depends(get_item_service),
    user: User = Depends(require_user_email),
):
    """
    Replace an item's fields.
    Requires authentication.
    """
    await service.update_item(item_id, item, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={401: {"model": ErrorResponseModel}},
)
async def delete_item(
    item_id: UUID,
    service: ItemService = Depends(get_item_service),
    user: User = Depends(require_user_email),
):
    """
    Delete an item. Deleting an unknown ID is not an error.
    Requires authentication.
    """
    await service.delete_item(item_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
