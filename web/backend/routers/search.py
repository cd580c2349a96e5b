"""Search router: normalized catalog search with basic-search fallback."""

from typing import Optional

from fastapi import APIRouter, Depends

from tunely.domain.library import CatalogSnapshot
from tunely.domain.search import QueryNormalizer, SearchResult, search_tracks_async

from ..deps import get_catalog, get_normalizer
from ..schemas import SearchRequest, SearchResponse, TrackOut

router = APIRouter()


def search_response(result: SearchResult) -> SearchResponse:
    return SearchResponse(
        query=result.query,
        corrected_query=result.corrected_query,
        search_intent=result.search_intent,
        used_fallback=result.used_fallback,
        tracks=[TrackOut.model_validate(track.to_dict()) for track in result.tracks],
    )


@router.post("/search", response_model=SearchResponse)
async def search(
    request: SearchRequest,
    catalog: CatalogSnapshot = Depends(get_catalog),
    normalizer: Optional[QueryNormalizer] = Depends(get_normalizer),
):
    """Search titles, artists and albums. Never fails because of the model."""
    result = await search_tracks_async(catalog.tracks, request.query, normalizer)
    return search_response(result)
