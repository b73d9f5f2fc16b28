"""Enums for the buyer lead domain.

Values are the wire strings used by the API and the database.
"""

from enum import Enum


class City(str, Enum):
    """City the buyer is looking in."""

    CHANDIGARH = "Chandigarh"
    MOHALI = "Mohali"
    ZIRAKPUR = "Zirakpur"
    PANCHKULA = "Panchkula"
    OTHER = "Other"


class PropertyType(str, Enum):
    """Kind of property the buyer wants."""

    APARTMENT = "Apartment"
    VILLA = "Villa"
    PLOT = "Plot"
    OFFICE = "Office"
    RETAIL = "Retail"

    @property
    def requires_bhk(self) -> bool:
        """Residential types must state a bedroom count."""
        return self in (PropertyType.APARTMENT, PropertyType.VILLA)


class BHK(str, Enum):
    """Bedroom-hall-kitchen unit count category."""

    ONE = "1"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    STUDIO = "Studio"


class Purpose(str, Enum):
    """Buy or rent."""

    BUY = "Buy"
    RENT = "Rent"


class Timeline(str, Enum):
    """How soon the buyer intends to close."""

    ZERO_TO_THREE_MONTHS = "0-3m"
    THREE_TO_SIX_MONTHS = "3-6m"
    MORE_THAN_SIX_MONTHS = ">6m"
    EXPLORING = "Exploring"


class Source(str, Enum):
    """Where the lead came from."""

    WEBSITE = "Website"
    REFERRAL = "Referral"
    WALK_IN = "Walk-in"
    CALL = "Call"
    OTHER = "Other"


class BuyerStatus(str, Enum):
    """Pipeline stage of the lead."""

    NEW = "New"
    QUALIFIED = "Qualified"
    CONTACTED = "Contacted"
    VISITED = "Visited"
    NEGOTIATION = "Negotiation"
    CONVERTED = "Converted"
    DROPPED = "Dropped"

