"""
Shared pytest fixtures and configuration for tests.

This module provides reusable fixtures that can be used across all test modules.
"""
import shutil
import tempfile
from typing import Dict

import pytest

from aluguel.core.config import Config
from aluguel.core.listing import Listing, Origin


@pytest.fixture
def sample_listing() -> Listing:
    """
    Creates a sample Listing object for testing.

    Returns:
        A Listing object with typical test data.
    """
    return Listing(
        link="https://www.olx.com.br/imoveis/apartamento-123",
        origin=Origin.OLX,
        title="Apartamento 2 quartos no Prado",
        location="Prado, Belo Horizonte",
        date_posted="Hoje, 10:15",
        bedrooms=2,
        bathrooms=1,
        area=55,
        price=1200,
        iptu=80,
        condominio=300,
    )


@pytest.fixture
def sample_listing_factory():
    """
    Factory fixture for creating sample listings with custom attributes.

    Returns:
        A function that creates Listing objects with specified attributes.
    """

    def _create_listing(
        link: str = "https://www.olx.com.br/imoveis/apartamento-123",
        origin: Origin = Origin.OLX,
        **kwargs,
    ) -> Listing:
        defaults = {
            "title": "Apartamento 2 quartos no Prado",
            "location": "Prado, Belo Horizonte",
            "bedrooms": 2,
            "bathrooms": 1,
            "area": 55,
            "price": 1200,
            "iptu": 80,
            "condominio": 300,
        }
        defaults.update(kwargs)
        return Listing(link=link, origin=origin, **defaults)

    return _create_listing


@pytest.fixture
def temp_buffer_dir():
    """
    Creates a temporary buffer directory for testing.

    Yields:
        Path to a temporary directory.

    Cleanup:
        Removes the directory and everything in it after the test.
    """
    path = tempfile.mkdtemp(prefix="buffer-")
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def valid_config_data() -> Dict:
    """
    Creates valid configuration data for testing.

    Returns:
        Dictionary with valid configuration structure.
    """
    return {
        "sources": {
            "olx": {"enabled": True, "start_urls": ["https://www.olx.com.br/imoveis/aluguel"]},
            "viva-real": {"enabled": False, "start_urls": []},
        },
        "filters": {"min_total": 1300, "max_total": 1700, "min_area": 35},
    }


@pytest.fixture
def sample_config(valid_config_data) -> Config:
    """
    Creates a sample Config object for testing.

    Returns:
        A Config object with valid test configuration.
    """
    return Config(valid_config_data)
