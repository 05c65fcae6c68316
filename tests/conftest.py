"""Pytest configuration and shared fixtures."""

import pytest

from legoview.models.data_models import AcquisitionResult
from tests.fixtures.sample_data import get_sample_deals, get_sample_sales


@pytest.fixture
def sample_config():
    """Provide a sample configuration for testing."""
    from legoview.models.config import ViewerConfig
    
    return ViewerConfig(
        api_base_url="http://testserver",
        default_page_size=6,
        max_retries=3,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        retry_jitter_max=0.0,
        log_level="DEBUG",
    )


@pytest.fixture
def deals_batch():
    deals = get_sample_deals(count=6)
    return AcquisitionResult(
        data=deals,
        meta={"currentPage": 1, "pageCount": 3, "pageSize": 6, "count": 18},
    )


@pytest.fixture
def sales_batch():
    sales = get_sample_sales("42151", count=4)
    return AcquisitionResult(
        data=sales,
        meta={"currentPage": 1, "pageCount": 1, "pageSize": 6, "count": 4},
    )
