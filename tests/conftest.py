"""Shared fixtures. The in-memory store stands in for MongoDB."""

import os

os.environ.setdefault("STORE_BACKEND", "memory")

import pytest

from app.domains.categories.service import CategoryService
from app.domains.items.service import ItemService
from app.domains.subcategories.service import SubcategoryService
from app.shared.memory_store import MemoryStore
from app.shared.transaction import TransactionCoordinator


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def coordinator(store):
    return TransactionCoordinator(store)


@pytest.fixture
def category_service(store):
    return CategoryService(store)


@pytest.fixture
def subcategory_service(store, coordinator):
    return SubcategoryService(store, coordinator)


@pytest.fixture
def item_service(store, coordinator):
    return ItemService(store, coordinator)
