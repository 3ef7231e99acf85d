from fastapi import APIRouter, Depends

from dailyfive.api.deps import get_market_service
from dailyfive.core.auth import get_current_user_id
from dailyfive.features.market.service import MarketService

router = APIRouter()


@router.get("/v1/market/items")
def list_items(service: MarketService = Depends(get_market_service)):
    return {"items": [item.to_dict() for item in service.list_items()]}


@router.post("/v1/market/items/{item_id}/purchase")
def purchase_item(
    item_id: int,
    user_id: str = Depends(get_current_user_id),
    service: MarketService = Depends(get_market_service),
):
    purchase, balance = service.purchase(user_id, item_id)
    return {"purchase": purchase.to_dict(), "achievement_points": balance}


@router.get("/v1/market/purchases")
def list_purchases(
    user_id: str = Depends(get_current_user_id),
    service: MarketService = Depends(get_market_service),
):
    return {"purchases": [purchase.to_dict() for purchase in service.list_purchases(user_id)]}
