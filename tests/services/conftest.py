#!/usr/bin/env python3
import pytest

from collectory.adapters.memory import InMemoryCollectionRepository, InMemoryItemRepository
from collectory.services.collections import CollectionService
from collectory.services.items import ItemService

OWNER = "user-1"

BOOK_FIELDS = {
    "title": {"type": "text", "required": True, "validation": {"maxLength": 200}},
    "pages": {"type": "number", "validation": {"minValue": 1}},
    "read_on": {"type": "date"},
}


@pytest.fixture
def repos():
    return InMemoryCollectionRepository(), InMemoryItemRepository()


@pytest.fixture
def collection_service(repos) -> CollectionService:
    return CollectionService(*repos)


@pytest.fixture
def item_service(repos) -> ItemService:
    return ItemService(*repos)


@pytest.fixture
def books(collection_service):
    return collection_service.create_collection(OWNER, "Books", BOOK_FIELDS, description="Shelf")
