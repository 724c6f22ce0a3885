"""
This module defines the Listing dataclass and the Origin of a listing.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from aluguel.core.constants import NOT_AVAILABLE

logger = logging.getLogger(__name__)


class Origin(str, Enum):
    """The source site a listing was scraped from."""
    OLX = "OLX"
    VIVA_REAL = "VIVA_REAL"
    ZAP_IMOVEIS = "ZAP_IMOVEIS"
    NETIMOVEIS = "NETIMOVEIS"

    @classmethod
    def from_tag(cls, tag: str) -> "Origin":
        """
        Resolves an origin from its serialized tag.

        Older buffers used the short tags "VR" and "ZI"; both are still accepted.

        Args:
            tag: Serialized origin value.

        Returns:
            The matching Origin.

        Raises:
            ValueError: If the tag is unknown.
        """
        legacy = {"VR": cls.VIVA_REAL, "ZI": cls.ZAP_IMOVEIS}
        if tag in legacy:
            return legacy[tag]
        return cls(tag)


_NUMERIC_FIELDS = ("bedrooms", "bathrooms", "area", "price", "iptu", "condominio")


@dataclass(frozen=True)
class Listing:
    """Represents a single rental listing in the canonical schema."""
    link: str
    origin: Origin
    title: str = ""
    location: str = NOT_AVAILABLE
    date_posted: str = NOT_AVAILABLE
    bedrooms: int = 0
    bathrooms: int = 0
    area: int = 0
    price: int = 0
    iptu: int = 0
    condominio: int = 0
    total_price: int = field(init=False)

    def __post_init__(self):
        """Validates the record and derives the total monthly price."""
        if not self.link:
            raise ValueError("A listing requires a non-empty link.")
        for name in _NUMERIC_FIELDS:
            if getattr(self, name) < 0:
                raise ValueError(f"Field '{name}' must be non-negative for {self.link}.")
        object.__setattr__(self, "total_price", self.price + self.iptu + self.condominio)

    def to_dict(self) -> Dict[str, Any]:
        """Serializes the listing to its JSON wire format."""
        return {
            "link": self.link,
            "title": self.title,
            "bedrooms": self.bedrooms,
            "area": self.area,
            "bathrooms": self.bathrooms,
            "price": self.price,
            "iptu": self.iptu,
            "condominio": self.condominio,
            "totalPrice": self.total_price,
            "location": self.location,
            "datePosted": self.date_posted,
            "origin": self.origin.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Listing":
        """
        Builds a listing from its JSON wire format.

        A stored "totalPrice" is ignored and recomputed, and unknown keys
        (such as the deprecated "oldPrice") are dropped.

        Args:
            data: Dictionary as produced by to_dict().

        Returns:
            The reconstructed Listing.
        """
        return cls(
            link=data.get("link") or "",
            origin=Origin.from_tag(data.get("origin", "")),
            title=data.get("title") or "",
            location=data.get("location") or NOT_AVAILABLE,
            date_posted=data.get("datePosted") or NOT_AVAILABLE,
            bedrooms=int(data.get("bedrooms") or 0),
            bathrooms=int(data.get("bathrooms") or 0),
            area=int(data.get("area") or 0),
            price=int(data.get("price") or 0),
            iptu=int(data.get("iptu") or 0),
            condominio=int(data.get("condominio") or 0),
        )

    def __str__(self):
        return (
            f"[{self.origin.value}] {self.title or self.link} - "
            f"R$ {self.total_price} - {self.area}m²"
        )
