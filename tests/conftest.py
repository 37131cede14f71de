"""Pytest fixtures: a small product catalog on disk."""

import pytest

from fakes import ROWS, write_catalog
from services.catalog_loader import CatalogLoader


@pytest.fixture
def catalog_path(tmp_path):
    return write_catalog(tmp_path / "products.csv", ROWS)


@pytest.fixture
def catalog(catalog_path):
    return CatalogLoader(catalog_path)
