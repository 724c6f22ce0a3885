"""
Maps raw, site-specific records into canonical Listing objects.

Every function here is pure: the same raw record always yields the same
Listing, and nothing is read from or written to the outside world.

Numeric convention shared by all sources: all non-digit characters are
stripped from a matched fragment before it becomes an int, so thousands
separators vanish ('1.700' -> 1700). A fragment with no digits yields 0.
"""
import logging
import re
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from aluguel.core.constants import NOT_AVAILABLE
from aluguel.core.errors import ExtractionItemError
from aluguel.core.listing import Listing, Origin
from aluguel.core.raw import (
    NetImoveisRawListing,
    OlxRawListing,
    RawListing,
    VivaRealRawListing,
    ZapImoveisRawListing,
)

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r'[^0-9]')
_FIRST_NUMBER = re.compile(r'[0-9]+(?:\.[0-9]{3})*')
_CONDO_FEE = re.compile(r'Cond\.\s*R\$\s*([\d.,]+)', re.IGNORECASE)
_IPTU_FEE = re.compile(r'IPTU\s*R\$\s*([\d.,]+)', re.IGNORECASE)


def parse_int(text: Optional[str]) -> int:
    """
    Strips every non-digit character and converts the rest to an int.

    Examples:
        '1.700' -> 1700
        'R$ 4.500/mês' -> 4500
        'N/A' -> 0

    Args:
        text: Fragment matched on the page.

    Returns:
        The parsed value, or 0 if there are no digits.
    """
    if not text:
        return 0
    digits = _NON_DIGITS.sub('', text)
    return int(digits) if digits else 0


def parse_currency(text: Optional[str]) -> int:
    """
    Parses a Brazilian currency amount, dropping the cents.

    Examples:
        'R$ 1.700,50' -> 1700
        'R$ 950' -> 950

    Args:
        text: Currency fragment matched on the page.

    Returns:
        The whole-real amount, or 0 if there are no digits.
    """
    if not text:
        return 0
    return parse_int(text.split(',')[0])


def first_int(text: Optional[str]) -> int:
    """
    Returns the first number in a fragment, ignoring anything after it.

    Used for ranges and units: '50-60 m²' -> 50, '2 quartos' -> 2.
    """
    if not text:
        return 0
    match = _FIRST_NUMBER.search(text)
    return parse_int(match.group(0)) if match else 0


def _clean(text: Optional[str], default: str = NOT_AVAILABLE) -> str:
    """Collapses whitespace and falls back to ``default`` when empty."""
    if not text:
        return default
    text = re.sub(r'\s+', ' ', text).strip()
    return text or default


def _fees(texts: Iterable[str]) -> Tuple[int, int]:
    """Reads (iptu, condominio) from lines like 'Cond. R$ 720 • IPTU R$ 271'."""
    iptu = condominio = 0
    for text in texts:
        condo_match = _CONDO_FEE.search(text)
        if condo_match:
            condominio = parse_currency(condo_match.group(1))
        iptu_match = _IPTU_FEE.search(text)
        if iptu_match:
            iptu = parse_currency(iptu_match.group(1))
    return iptu, condominio


def normalize_olx(raw: OlxRawListing) -> Listing:
    """Maps an OLX card into a Listing."""
    bedrooms = bathrooms = area = 0
    for label, text in raw.detail_labels:
        label_lower = label.lower()
        if 'quarto' in label_lower:
            bedrooms = first_int(label)
        elif 'metro' in label_lower or 'm²' in label_lower or 'm²' in text.lower():
            area = first_int(label) or first_int(text)
        elif 'banheiro' in label_lower:
            bathrooms = first_int(label)

    iptu = condominio = 0
    for info in raw.price_info_texts:
        info_lower = info.strip().lower()
        if info_lower.startswith('iptu'):
            iptu = parse_currency(info)
        elif info_lower.startswith(('condomínio', 'condominio')):
            condominio = parse_currency(info)

    return Listing(
        link=raw.link,
        origin=OlxRawListing.origin,
        title=_clean(raw.title, ""),
        location=_clean(raw.location),
        date_posted=_clean(raw.date_posted),
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        area=area,
        price=parse_currency(raw.price_text),
        iptu=iptu,
        condominio=condominio,
    )


def normalize_viva_real(raw: VivaRealRawListing) -> Listing:
    """Maps a Viva Real card into a Listing."""
    iptu, condominio = _fees(raw.fee_texts)
    return Listing(
        link=raw.link,
        origin=VivaRealRawListing.origin,
        title=_clean(raw.title, ""),
        location=_clean(raw.street),
        bedrooms=first_int(raw.details.get('rp-cardProperty-bedroomQuantity-txt')),
        bathrooms=first_int(raw.details.get('rp-cardProperty-bathroomQuantity-txt')),
        area=first_int(raw.details.get('rp-cardProperty-propertyArea-txt')),
        price=parse_currency(raw.price_text),
        iptu=iptu,
        condominio=condominio,
    )


def normalize_zap_imoveis(raw: ZapImoveisRawListing) -> Listing:
    """Maps a ZAP Imóveis card into a Listing."""
    iptu, condominio = _fees([raw.fees_text])
    price_text = re.sub(r'/m[êe]s', '', raw.price_text, flags=re.IGNORECASE)
    return Listing(
        link=raw.link,
        origin=ZapImoveisRawListing.origin,
        title=_clean(raw.title, ""),
        location=_clean(raw.location),
        bedrooms=first_int(raw.bedrooms_text),
        bathrooms=first_int(raw.bathrooms_text),
        area=first_int(raw.area_text),
        price=parse_currency(price_text),
        iptu=iptu,
        condominio=condominio,
    )


def normalize_netimoveis(raw: NetImoveisRawListing) -> Listing:
    """Maps a NetImóveis detail page into a Listing."""
    price = iptu = condominio = 0
    for name, value in raw.price_details.items():
        if 'valor de locação' in name:
            price = parse_currency(value)
        elif 'condomínio' in name:
            condominio = parse_currency(value)
        elif 'iptu' in name:
            iptu = parse_currency(value)

    bedrooms = bathrooms = area = 0
    for value in raw.feature_values:
        value_lower = value.lower()
        if 'quart' in value_lower:
            bedrooms = first_int(value)
        elif 'banhei' in value_lower:
            bathrooms = first_int(value)
        elif 'm²' in value_lower:
            area = parse_currency(value)

    return Listing(
        link=raw.link,
        origin=NetImoveisRawListing.origin,
        title=_clean(raw.title, ""),
        location=_clean(raw.location),
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        area=area,
        price=price,
        iptu=iptu,
        condominio=condominio,
    )


NORMALIZERS: Dict[Origin, Callable[..., Listing]] = {
    Origin.OLX: normalize_olx,
    Origin.VIVA_REAL: normalize_viva_real,
    Origin.ZAP_IMOVEIS: normalize_zap_imoveis,
    Origin.NETIMOVEIS: normalize_netimoveis,
}


def normalize(raw: RawListing) -> Listing:
    """
    Converts any raw record into a canonical Listing.

    Args:
        raw: A raw record produced by one of the source adapters.

    Returns:
        The canonical Listing, with total_price derived from its parts.

    Raises:
        ExtractionItemError: If the record has no link or an unknown origin.
    """
    normalizer = NORMALIZERS.get(getattr(raw, 'origin', None))
    if normalizer is None:
        raise ExtractionItemError(f"No normalizer for record of type {type(raw).__name__}.")
    if not raw.link:
        raise ExtractionItemError(f"{raw.origin.value} record has no link.")
    try:
        return normalizer(raw)
    except ValueError as e:
        raise ExtractionItemError(f"Invalid {raw.origin.value} record {raw.link}: {e}") from e


def normalize_batch(raws: Iterable[RawListing]) -> Tuple[List[Listing], int]:
    """
    Normalizes a sequence of raw records, skipping the ones that fail.

    Args:
        raws: Raw records in page order.

    Returns:
        A tuple of (listings in the same order, number of skipped records).
    """
    listings: List[Listing] = []
    skipped = 0
    for raw in raws:
        try:
            listings.append(normalize(raw))
        except ExtractionItemError as e:
            logger.warning(f"Skipping record: {e}")
            skipped += 1
    return listings, skipped
