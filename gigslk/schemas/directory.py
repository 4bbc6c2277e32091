"""Public artist directory schemas."""

from pydantic import BaseModel, ConfigDict, Field


class ArtistListing(BaseModel):
    """A public performer profile with display defaults applied."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = Field(default=None, description="Profile record ID")
    user_id: int | None = Field(default=None, description="Owning account ID")
    full_name: str = Field(description="Full name, 'Unknown Artist' if unset")
    stage_name: str = Field(default="", description="Stage name")
    location: str = Field(description="Home city")
    performance_type: str = Field(description="Offering category")
    bio: str = Field(description="About text")
    price: str = Field(description="Free-text price display")
    skills: list[str] = Field(default_factory=list, description="Skills")
    profile_picture_url: str = Field(description="Absolute avatar URL or placeholder")
    contact_number: str = Field(description="Contact number")
    direct_booking: bool = Field(default=False, description="Accepts direct bookings")
    travel_distance: float = Field(default=0, description="Travel distance in km")
    availability_weekdays: bool = False
    availability_weekends: bool = False
    availability_morning: bool = False
    availability_evening: bool = False
    gallery_images: list[str] = Field(default_factory=list, description="Absolute gallery URLs")
    rating: float = Field(default=0, description="Average rating")
    review_count: int = Field(default=0, description="Number of reviews")

    @property
    def card_id(self) -> str:
        return str(self.id if self.id is not None else self.user_id)


class ArtistCard(BaseModel):
    """Summary of a listing for the directory grid."""

    id: str = Field(description="Listing ID (record ID, else account ID)")
    name: str = Field(description="Stage name, else full name")
    category: str = Field(description="Performance type")
    location: str = Field(description="Home city")
    rating: float = Field(description="Average rating")
    review_count: int = Field(description="Number of reviews")
    price: str = Field(description="Price display")
    image: str = Field(description="Avatar URL or placeholder")


class ArtistListResponse(BaseModel):
    """Directory search result."""

    artists: list[ArtistCard] = Field(default_factory=list, description="Matching artists")
    total: int = Field(description="Number of matches")
