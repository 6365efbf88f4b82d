"""Recent search history endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from skytrack.services.recent_searches import RecentSearchStore

router = APIRouter(prefix="/api/v1", tags=["history"])

_store: RecentSearchStore | None = None


def get_recent_search_store() -> RecentSearchStore:
    """Return the process-wide recent search store."""

    global _store
    if _store is None:
        _store = RecentSearchStore()
    return _store


@router.get("/recent-searches", summary="Most recent flight searches")
def list_recent_searches(
    store: RecentSearchStore = Depends(get_recent_search_store),
) -> dict[str, list[str]]:
    return {"recent_searches": store.items}
