from fastapi import APIRouter, Depends, HTTPException, Request
import logging
from typing import List
from app.domains.subcategories.models import SubcategoryCreate, SubcategoryOut, SubcategoryUpdate
from app.domains.subcategories.service import SubcategoryService
from app.shared.errors import CatalogError

logger = logging.getLogger(__name__)

router = APIRouter()


def get_subcategory_service(request: Request) -> SubcategoryService:
    return request.app.state.subcategory_service


@router.post("/category/{category_id}/subcategory", response_model=SubcategoryOut, status_code=201)
async def create_subcategory(
    category_id: str,
    payload: SubcategoryCreate,
    service: SubcategoryService = Depends(get_subcategory_service)
):
    try:
        return await service.create(category_id, payload)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error creating subcategory under {category_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/subcategory/all", response_model=List[SubcategoryOut])
async def get_all_subcategories(service: SubcategoryService = Depends(get_subcategory_service)):
    try:
        return await service.get_all()
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error fetching subcategories: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/category/{category_id}/subcategory/all", response_model=List[SubcategoryOut])
async def get_subcategories_by_category(
    category_id: str,
    service: SubcategoryService = Depends(get_subcategory_service)
):
    try:
        return await service.get_by_category(category_id)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error fetching subcategories of {category_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/subcategory/{id_or_name}", response_model=SubcategoryOut)
async def get_subcategory(
    id_or_name: str,
    service: SubcategoryService = Depends(get_subcategory_service)
):
    try:
        return await service.get_by_id_or_name(id_or_name)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error fetching subcategory {id_or_name}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.put("/subcategory/{subcategory_id}", response_model=SubcategoryOut)
async def edit_subcategory(
    subcategory_id: str,
    payload: SubcategoryUpdate,
    service: SubcategoryService = Depends(get_subcategory_service)
):
    try:
        return await service.edit(subcategory_id, payload)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error editing subcategory {subcategory_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")
