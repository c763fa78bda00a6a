"""
Category API endpoints
"""

from typing import List

from fastapi import APIRouter, Depends

from blueprint.core.errors import ErrorResponseModel
from blueprint.dependencies.item import get_category_service
from blueprint.schemas.category import CategoryResponse
from blueprint.services.category import CategoryService

router = APIRouter()


@router.get(
    "",
    response_model=List[CategoryResponse],
    responses={503: {"model": ErrorResponseModel}},
)
async def get_categories(service: CategoryService = Depends(get_category_service)):
    """
    Get all categories.
    """
    return await service.list_categories()
