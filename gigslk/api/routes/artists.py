"""Public artist directory routes."""

from fastapi import APIRouter, Query

from gigslk.api.deps import ApiClient, MediaResolver
from gigslk.schemas.directory import ArtistListing, ArtistListResponse
from gigslk.services.directory_service import DirectoryService

router = APIRouter(prefix="/artists", tags=["artists"])


@router.get(
    "",
    response_model=ArtistListResponse,
    summary="Search artists",
    description="Lists performers, optionally filtered by a case-insensitive search, location and minimum rating.",
)
async def list_artists(
    api: ApiClient,
    resolver: MediaResolver,
    q: str = Query(default="", description="Matches name, category, location or price"),
    location: str | None = Query(default=None, description='Exact location, case-insensitive; "All Locations" means any'),
    min_rating: float | None = Query(default=None, ge=0, le=5, description="Minimum average rating"),
) -> ArtistListResponse:
    cards = await DirectoryService(api, resolver).search(q, location=location, min_rating=min_rating)
    return ArtistListResponse(artists=cards, total=len(cards))


@router.get(
    "/{artist_id}",
    response_model=ArtistListing,
    summary="Get an artist",
    description="Full public profile of one performer.",
)
async def get_artist(artist_id: str, api: ApiClient, resolver: MediaResolver) -> ArtistListing:
    return await DirectoryService(api, resolver).get(artist_id)
