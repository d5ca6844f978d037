from fastapi import APIRouter, Depends, HTTPException, Request, status

from ratefeed.cache import ReadCache
from ratefeed.schemas.currency import CurrencyRecord

router = APIRouter()


def get_cache(request: Request) -> ReadCache:
    return request.app.state.cache


@router.get("/health")
def health(cache: ReadCache = Depends(get_cache)) -> dict:
    snapshot = cache.get()
    return {
        "status": "ok",
        "updated_at": snapshot.update.timestamp if snapshot else None,
    }


@router.get("/currencies.json", response_model=list[CurrencyRecord])
def get_currencies(cache: ReadCache = Depends(get_cache)) -> list[CurrencyRecord]:
    snapshot = cache.get()
    if snapshot is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"message": "Currency data is not loaded yet."},
        )
    return list(snapshot.currencies)
