from fastapi import APIRouter, Depends, HTTPException, Query, Request
import logging
from typing import List, Optional
from app.domains.items.models import ItemCreate, ItemOut, ItemUpdate
from app.domains.items.service import ItemService
from app.shared.errors import CatalogError

logger = logging.getLogger(__name__)

router = APIRouter()


def get_item_service(request: Request) -> ItemService:
    return request.app.state.item_service


@router.post("/item", response_model=ItemOut, status_code=201)
async def create_item(
    payload: ItemCreate,
    service: ItemService = Depends(get_item_service)
):
    try:
        return await service.create(payload)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error creating item: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/item/all", response_model=List[ItemOut])
async def get_all_items(service: ItemService = Depends(get_item_service)):
    try:
        return await service.get_all()
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error fetching items: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/category/{category_id}/item/all", response_model=List[ItemOut])
async def get_items_by_category(
    category_id: str,
    service: ItemService = Depends(get_item_service)
):
    try:
        return await service.get_by_category(category_id)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error fetching items of category {category_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/subcategory/{subcategory_id}/item/all", response_model=List[ItemOut])
async def get_items_by_subcategory(
    subcategory_id: str,
    service: ItemService = Depends(get_item_service)
):
    try:
        return await service.get_by_subcategory(subcategory_id)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error fetching items of subcategory {subcategory_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


# Must be declared before /item/{id_or_name} or "search" is taken as a name
@router.get("/item/search", response_model=List[ItemOut])
async def search_items(
    name: Optional[str] = Query(None),
    service: ItemService = Depends(get_item_service)
):
    try:
        return await service.search_by_name(name)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error searching items for '{name}': {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/item/{id_or_name}", response_model=ItemOut)
async def get_item(
    id_or_name: str,
    service: ItemService = Depends(get_item_service)
):
    try:
        return await service.get_by_id_or_name(id_or_name)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error fetching item {id_or_name}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.put("/item/{item_id}", response_model=ItemOut)
async def edit_item(
    item_id: str,
    payload: ItemUpdate,
    service: ItemService = Depends(get_item_service)
):
    try:
        return await service.edit(item_id, payload)
    except CatalogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error editing item {item_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")
