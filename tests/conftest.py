"""
Shared Test Configuration and Fixtures

Provides term sources, registries, settings and configuration files shared
by the whole test suite.
"""

import os
from pathlib import Path
from typing import Any, Dict, List

import pytest
import yaml

from facetsearch.bootstrap import default_filters
from facetsearch.core.config.models import AppConfig, SearchSettings
from facetsearch.filters.registry import FilterRegistry
from facetsearch.search.composer import SearchQuery
from facetsearch.search.renderer import FilterRenderer
from facetsearch.terms import InMemoryTermProvider, Term


CATEGORY_TAXONOMY = "listing_category"
TAG_TAXONOMY = "listing_tag"


@pytest.fixture
def category_terms() -> List[Term]:
    """Three-level category tree plus a second root and an empty term."""
    return [
        Term(term_id=1, name="Food", taxonomy=CATEGORY_TAXONOMY, slug="food", count=8),
        Term(term_id=2, name="Restaurants", taxonomy=CATEGORY_TAXONOMY, slug="restaurants", parent=1, count=5),
        Term(term_id=3, name="Pizza", taxonomy=CATEGORY_TAXONOMY, slug="pizza", parent=2, count=3),
        Term(term_id=4, name="Hotels", taxonomy=CATEGORY_TAXONOMY, slug="hotels", count=2),
        Term(term_id=5, name="Closed", taxonomy=CATEGORY_TAXONOMY, slug="closed", count=0),
    ]


@pytest.fixture
def tag_terms() -> List[Term]:
    """Tags with distinct usage counts."""
    return [
        Term(term_id=10, name="Wifi", taxonomy=TAG_TAXONOMY, slug="wifi", count=9),
        Term(term_id=11, name="Parking", taxonomy=TAG_TAXONOMY, slug="parking", count=4),
        Term(term_id=12, name="Pets", taxonomy=TAG_TAXONOMY, slug="pets", count=7),
    ]


@pytest.fixture
def term_provider(category_terms, tag_terms) -> InMemoryTermProvider:
    """In-memory term source holding the category and tag fixtures."""
    return InMemoryTermProvider(category_terms + tag_terms)


@pytest.fixture
def search_settings() -> SearchSettings:
    """Default search settings."""
    return SearchSettings()


@pytest.fixture
def registry(term_provider, search_settings) -> FilterRegistry:
    """Registry with the default keyword, category and tag filters."""
    registry = FilterRegistry()
    for filter_instance in default_filters(search_settings, term_provider):
        registry.register(filter_instance)
    return registry


@pytest.fixture
def search_query(registry, search_settings) -> SearchQuery:
    """Composer over the default registry."""
    return SearchQuery(registry, search_settings)


@pytest.fixture
def renderer(registry, search_query) -> FilterRenderer:
    """Renderer over the default registry."""
    return FilterRenderer(registry, search_query)


@pytest.fixture
def sample_config_dict() -> Dict[str, Any]:
    """Configuration with one range filter, one date filter and a few terms."""
    return {
        'search': {
            'searchable_meta_keys': ['_listing_address'],
            'filters': [
                {'name': 'price', 'type': 'range', 'label': 'Price', 'priority': 30,
                 'min': 0, 'max': 1000, 'prefix': '$'},
                {'name': 'opened', 'type': 'date_range', 'priority': 40},
            ],
        },
        'terms': [
            {'id': 1, 'name': 'Food', 'taxonomy': CATEGORY_TAXONOMY, 'count': 3},
            {'id': 2, 'name': 'Pizza', 'taxonomy': CATEGORY_TAXONOMY, 'parent': 1, 'count': 2},
            {'id': 10, 'name': 'Wifi', 'taxonomy': TAG_TAXONOMY, 'count': 4},
        ],
    }


@pytest.fixture
def sample_app_config(sample_config_dict) -> AppConfig:
    """Validated AppConfig built from ``sample_config_dict``."""
    return AppConfig(**sample_config_dict)


@pytest.fixture
def config_file(tmp_path, sample_config_dict) -> Path:
    """YAML configuration file holding ``sample_config_dict``."""
    path = tmp_path / "facetsearch.yaml"
    with open(path, 'w', encoding='utf-8') as f:
        yaml.dump(sample_config_dict, f)
    return path


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep tests away from real config files and FACETSEARCH_* variables."""
    for key in list(os.environ):
        if key.startswith("FACETSEARCH_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
