"""Public artist directory: listing, search and lookup."""

import logging
from typing import Any

from gigslk.api.middleware.error_handler import NotFoundError
from gigslk.schemas.directory import ArtistCard, ArtistListing
from gigslk.services.gigs_api_client import GigsApiClient
from gigslk.services.media import MediaUrlResolver
from gigslk.services.profile_fields import coerce_flag, coerce_number, coerce_tags

logger = logging.getLogger(__name__)

NO_IMAGE_PLACEHOLDER = "https://placehold.co/400x400/553c9a/ffffff?text=No+Image"
ALL_LOCATIONS = "All Locations"


def _text(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value else default


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def to_listing(record: dict[str, Any], resolver: MediaUrlResolver) -> ArtistListing:
    """Apply the directory's display defaults to a raw performer record."""
    avatar = resolver.persisted(record.get("profile_picture_url"))
    return ArtistListing(
        id=_optional_int(record.get("id")),
        user_id=_optional_int(record.get("user_id")),
        full_name=_text(record.get("full_name"), "Unknown Artist"),
        stage_name=_text(record.get("stage_name"), ""),
        location=_text(record.get("location"), "Not Set"),
        performance_type=_text(record.get("performance_type"), "General"),
        bio=_text(record.get("bio"), "No bio provided."),
        price=_text(record.get("price"), "Price Varies"),
        skills=coerce_tags(record.get("skills")),
        profile_picture_url=avatar.url if avatar else NO_IMAGE_PLACEHOLDER,
        contact_number=_text(record.get("contact_number"), "Not Set"),
        direct_booking=coerce_flag(record.get("direct_booking")),
        travel_distance=coerce_number(record.get("travel_distance") or 0),
        availability_weekdays=coerce_flag(record.get("availability_weekdays")),
        availability_weekends=coerce_flag(record.get("availability_weekends")),
        availability_morning=coerce_flag(record.get("availability_morning")),
        availability_evening=coerce_flag(record.get("availability_evening")),
        gallery_images=[resolver.absolutize(path) for path in coerce_tags(record.get("gallery_images")) if path],
        rating=coerce_number(record.get("rating") or 0),
        review_count=coerce_number(record.get("review_count") or 0, integer=True),
    )


def to_card(listing: ArtistListing) -> ArtistCard:
    return ArtistCard(
        id=listing.card_id,
        name=listing.stage_name or listing.full_name,
        category=listing.performance_type,
        location=listing.location,
        rating=listing.rating,
        review_count=listing.review_count,
        price=listing.price,
        image=listing.profile_picture_url,
    )


def matches(card: ArtistCard, query: str) -> bool:
    """Case-insensitive substring match on name, category, location or price."""
    needle = query.strip().lower()
    if not needle:
        return True
    return any(needle in value.lower() for value in (card.name, card.category, card.location, card.price))


class DirectoryService:
    """Reads the public performer listing."""

    def __init__(self, api: GigsApiClient, resolver: MediaUrlResolver) -> None:
        self.api = api
        self.resolver = resolver

    async def listings(self) -> list[ArtistListing]:
        records = await self.api.list_performers()
        return [to_listing(record, self.resolver) for record in records]

    async def search(
        self,
        query: str = "",
        location: str | None = None,
        min_rating: float | None = None,
    ) -> list[ArtistCard]:
        """Cards for every listing that matches all given criteria."""
        cards = [to_card(listing) for listing in await self.listings()]
        results = [card for card in cards if matches(card, query)]
        location = (location or "").strip().lower()
        if location and location != ALL_LOCATIONS.lower():
            results = [card for card in results if card.location.lower() == location]
        if min_rating is not None:
            results = [card for card in results if card.rating >= min_rating]
        logger.debug("Directory search %r matched %d of %d artists", query, len(results), len(cards))
        return results

    async def get(self, artist_id: str) -> ArtistListing:
        """Look up one listing by its card ID.

        Raises:
            NotFoundError: If no listing has that ID.
        """
        for listing in await self.listings():
            if listing.card_id == artist_id:
                return listing
        raise NotFoundError("Artist details could not be loaded.")
