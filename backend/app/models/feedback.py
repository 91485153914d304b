from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from backend.core.enums import Category, FeedbackType, Sentiment, Severity, Source


Rating = Annotated[int, Field(ge=1, le=5)]
ShortComment = Annotated[str, Field(max_length=500)]
LongComment = Annotated[str, Field(max_length=1000)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class GuestFeedbackIn(CamelModel):
    rating: Optional[Rating] = None
    comment: Optional[LongComment] = None
    room_number: Optional[str] = Field(default=None, max_length=50)
    language: Optional[str] = Field(default=None, max_length=20)


class StaffFeedbackIn(CamelModel):
    category: Optional[Category] = None
    severity: Optional[Severity] = None
    location: Optional[str] = Field(default=None, max_length=255)
    details: Optional[LongComment] = None


class FeedbackContext(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )

    loc: Optional[str] = Field(default=None, max_length=50)
    id: Optional[str] = Field(default=None, max_length=100)
    token: Optional[str] = Field(default=None, max_length=255)
    guest_name: Optional[str] = Field(default=None, max_length=255)


class FeedbackAreaFields(CamelModel):
    """Per-area ratings and comments shared by the contextual form and the record."""

    comment: Optional[LongComment] = None

    overall_rating: Optional[Rating] = None
    feedback_type: Optional[FeedbackType] = None
    booking_reference: Optional[str] = Field(default=None, max_length=100)
    contact_consent: bool = False
    other_comments: Optional[LongComment] = None

    room_cleanliness: Optional[Rating] = None
    room_comfort: Optional[Rating] = None
    room_noise: Optional[Rating] = None
    bathroom_cleanliness: Optional[Rating] = None
    room_amenities: Optional[Rating] = None
    room_comments: Optional[ShortComment] = None

    food_quality: Optional[Rating] = None
    food_variety: Optional[Rating] = None
    dining_service: Optional[Rating] = None
    service_speed: Optional[Rating] = None
    staff_attentiveness: Optional[Rating] = None
    ambiance_rating: Optional[Rating] = None
    dining_comments: Optional[ShortComment] = None

    pool_cleanliness: Optional[Rating] = None
    seating_availability: Optional[Rating] = None
    towel_availability: Optional[Rating] = None
    pool_ambiance: Optional[Rating] = None
    wifi_rating: Optional[Rating] = None
    restroom_rating: Optional[Rating] = None
    amenities_comments: Optional[ShortComment] = None

    staff_helpfulness: Optional[Rating] = None
    staff_friendliness: Optional[Rating] = None
    reception_rating: Optional[Rating] = None
    checkout_speed: Optional[Rating] = None
    checkout_staff_friendliness: Optional[Rating] = None
    billing_accuracy: Optional[Rating] = None
    staff_mention: Optional[str] = Field(default=None, max_length=255)
    staff_comments: Optional[ShortComment] = None
    checkout_comments: Optional[ShortComment] = None

    value_rating: Optional[Rating] = None

    simulated_file_names: List[str] = Field(default_factory=list)


class ContextualFeedbackIn(FeedbackAreaFields):
    context: Optional[FeedbackContext] = None
    source: Optional[Source] = None
    feedback_area: Optional[str] = Field(default=None, max_length=50)


class FeedbackOut(FeedbackAreaFields):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int
    source: Source
    timestamp: datetime
    sentiment: Sentiment = Sentiment.NEUTRAL
    is_negative: bool = False
    feedback_area: Optional[str] = None

    rating: Optional[int] = None
    room_number: Optional[str] = None
    language: Optional[str] = None

    context_loc: Optional[str] = None
    context_id: Optional[str] = None
    context_token: Optional[str] = None
    context_guest_name: Optional[str] = None

    category: Optional[Category] = None
    severity: Optional[Severity] = None
    location: Optional[str] = None
    details: Optional[str] = None


class TokenContext(CamelModel):
    loc: str
    id: Optional[str] = None
    guest_name: Optional[str] = None


class TokenCreate(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )

    loc: str = Field(min_length=1, max_length=50)
    id: Optional[str] = Field(default=None, max_length=100)
    guest_name: Optional[str] = Field(default=None, max_length=255)
    ttl_hours: Optional[int] = Field(default=None, ge=1, le=24 * 30)


class TokenOut(CamelModel):
    token: str
    context: TokenContext
    expires_at: datetime


class TokenValidationOut(CamelModel):
    valid: bool
    context: Optional[TokenContext] = None
    message: Optional[str] = None

    def to_content(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
