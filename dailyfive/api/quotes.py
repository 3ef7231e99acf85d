from fastapi import APIRouter, Depends

from dailyfive.api.deps import get_quote_service
from dailyfive.features.quotes.service import QuoteService

router = APIRouter()


@router.get("/v1/quotes/random")
def random_quote(service: QuoteService = Depends(get_quote_service)):
    """A random motivational quote (no user context needed)."""
    return service.random_quote().to_dict()
