from fastapi import APIRouter, Depends, HTTPException, Request
import logging
from typing import List
from app.domains.categories.models import CategoryCreate, CategoryOut, CategoryUpdate
from app.domains.categories.service import CategoryService
from app.shared.errors import CatalogError

logger = logging.getLogger(__name__)

router = APIRouter()


def get_category_service(request: Request) -> CategoryService:
    return request.app.state.category_service


@router.post("/category", response_model=CategoryOut, status_code=201)
async def create_category(
    payload: CategoryCreate,
    service: CategoryService = Depends(get_category_service)
):
    try:
        return await service.create(payload)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error creating category: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/category/all", response_model=List[CategoryOut])
async def get_all_categories(service: CategoryService = Depends(get_category_service)):
    try:
        return await service.get_all()
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error fetching categories: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/category/{id_or_name}", response_model=CategoryOut)
async def get_category(
    id_or_name: str,
    service: CategoryService = Depends(get_category_service)
):
    try:
        return await service.get_by_id_or_name(id_or_name)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error fetching category {id_or_name}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.put("/category/{category_id}", response_model=CategoryOut)
async def edit_category(
    category_id: str,
    payload: CategoryUpdate,
    service: CategoryService = Depends(get_category_service)
):
    try:
        return await service.edit(category_id, payload)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error editing category {category_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")
