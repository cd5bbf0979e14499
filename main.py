from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from app.domains.categories.routes import router as category_router
from app.domains.subcategories.routes import router as subcategory_router
from app.domains.items.routes import router as item_router
from app.domains.categories.service import CategoryService
from app.domains.subcategories.service import SubcategoryService
from app.domains.items.service import ItemService
from app.config.mongodb import mongodb
from app.config.setting import settings
from app.shared.memory_store import MemoryStore
from app.shared.models import first_error_message
from app.shared.mongo_store import MongoStore
from app.shared.transaction import TransactionCoordinator
import logging
from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s"
)

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.parsed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def build_store():
    if settings.store_backend == "memory":
        logger.info("Using in-memory store")
        return MemoryStore()

    try:
        await mongodb.init_db()
    except Exception as e:
        logger.error(f"MongoDB connection failed: {str(e)}")
        raise
    store = MongoStore(mongodb)
    await store.ensure_indexes()
    return store


@app.on_event("startup")
async def startup():
    store = await build_store()
    coordinator = TransactionCoordinator(store)

    app.state.store = store
    app.state.category_service = CategoryService(store)
    app.state.subcategory_service = SubcategoryService(store, coordinator)
    app.state.item_service = ItemService(store, coordinator)
    logger.info(f"{settings.app_name} started ({settings.environment}, store={settings.store_backend})")


@app.on_event("shutdown")
def shutdown_store():
    app.state.store.close()


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Bad input is a client error (400), same as validation failures in the services
    return JSONResponse(status_code=400, content={"detail": first_error_message(exc)})


@app.get("/", response_class=PlainTextResponse)
def root():
    return "Menu Management Backend is running!"


app.include_router(category_router, prefix="/api", tags=["Category"])
app.include_router(subcategory_router, prefix="/api", tags=["Subcategory"])
app.include_router(item_router, prefix="/api", tags=["Item"])
