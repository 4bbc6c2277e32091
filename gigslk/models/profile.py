"""Upstream profile record type definitions.

These describe the JSON records the marketplace backend returns, before
any defaulting or coercion. Every field may be missing or null.
"""

from typing import TypedDict


class ArtistRecord(TypedDict, total=False):
    """Performer profile row as returned by /api/performers/profile."""

    id: int | None
    user_id: int | None
    full_name: str | None
    stage_name: str | None
    location: str | None
    performance_type: str | None
    bio: str | None
    price: str | None
    skills: list[str] | str | None
    profile_picture_url: str | None
    contact_number: str | None
    direct_booking: bool | int | None
    travel_distance: float | str | None
    availability_weekdays: bool | int | None
    availability_weekends: bool | int | None
    availability_morning: bool | int | None
    availability_evening: bool | int | None
    gallery_images: list[str] | str | None
    # DECIMAL columns arrive as strings
    rating: float | str | None
    review_count: int | None


class HostRecord(TypedDict, total=False):
    """Host profile row as returned by /api/hosts/profile."""

    id: int | None
    user_id: int | None
    company_organization: str | None
    contact_person: str | None
    contact_number: str | None
    location: str | None
    event_types_typically_hosted: list[str] | str | None
    bio: str | None
    default_budget_range_min: float | str | None
    default_budget_range_max: float | str | None
    preferred_performer_types: list[str] | str | None
    preferred_locations_for_gigs: list[str] | str | None
    # TINYINT(1) columns arrive as 0/1
    urgent_booking_enabled: bool | int | None
    email_notifications_enabled: bool | int | None
    sms_notifications_enabled: bool | int | None
    profile_picture_url: str | None
    gallery_images: list[str] | str | None
    events_hosted: int | None
    average_rating: float | str | None
    total_reviews: int | None


ProfileRecord = ArtistRecord | HostRecord
