"""Example item endpoints guarded by an API key."""
from typing import Any, Dict

from fastapi import HTTPException, Request, status

from route_creator.middleware import ApiKeyAuthentication
from route_creator.routing import ApiRouter


class ItemStore:
    """Keeps items in memory for the example routes."""

    def __init__(self):
        self._items: Dict[str, Dict[str, Any]] = {}

    async def show(self, request: Request):
        item_id = request.path_params["item_id"]
        item = self._items.get(item_id)
        if item is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Item {item_id} not found",
            )
        return {"id": item_id, **item}

    async def save(self, request: Request):
        item_id = request.path_params["item_id"]
        self._items[item_id] = await request.json()
        return {"id": item_id, **self._items[item_id]}

    async def remove(self, request: Request):
        self._items.pop(request.path_params["item_id"], None)
        return {"deleted": True}


def declare_routes(routes: ApiRouter, store: ItemStore = None) -> ItemStore:
    store = store or ItemStore()
    guard = [ApiKeyAuthentication()]

    routes.get("/items/{item_id}", store.show).middleware(guard)
    routes.put("/items/{item_id}", store.save).middleware(guard)
    routes.delete("/items/{item_id}", store.remove).middleware(guard)
    return store
