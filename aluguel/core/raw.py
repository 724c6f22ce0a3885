"""
Raw, site-specific listing records.

Each source adapter produces one of these variants, holding the text it
pulled from the page. They are tagged by ``origin`` and only turned into a
canonical Listing by the normalizer.
"""
from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Tuple, Union

from aluguel.core.constants import NOT_AVAILABLE
from aluguel.core.listing import Origin


@dataclass
class OlxRawListing:
    """A card from an OLX search result page."""
    origin: ClassVar[Origin] = Origin.OLX

    link: str
    title: str = ""
    detail_labels: List[Tuple[str, str]] = field(default_factory=list)
    """(aria-label, visible text) pairs of the card's detail badges."""
    price_text: str = ""
    price_info_texts: List[str] = field(default_factory=list)
    """Secondary price lines such as 'IPTU R$ 50'."""
    location: str = NOT_AVAILABLE
    date_posted: str = NOT_AVAILABLE


@dataclass
class VivaRealRawListing:
    """A card from a Viva Real search result page."""
    origin: ClassVar[Origin] = Origin.VIVA_REAL

    link: str
    title: str = ""
    street: str = NOT_AVAILABLE
    details: Dict[str, str] = field(default_factory=dict)
    """Card feature texts keyed by their data-cy attribute."""
    price_text: str = ""
    fee_texts: List[str] = field(default_factory=list)


@dataclass
class ZapImoveisRawListing:
    """A card from a ZAP Imóveis search result page."""
    origin: ClassVar[Origin] = Origin.ZAP_IMOVEIS

    link: str
    title: str = ""
    location: str = ""
    bedrooms_text: str = ""
    bathrooms_text: str = ""
    area_text: str = ""
    price_text: str = ""
    fees_text: str = ""


@dataclass
class NetImoveisRawListing:
    """A NetImóveis property, read from its detail page."""
    origin: ClassVar[Origin] = Origin.NETIMOVEIS

    link: str
    title: str = ""
    location: str = ""
    price_details: Dict[str, str] = field(default_factory=dict)
    """Price table rows: lower-cased name to displayed value."""
    feature_values: List[str] = field(default_factory=list)


RawListing = Union[
    OlxRawListing, VivaRealRawListing, ZapImoveisRawListing, NetImoveisRawListing
]
