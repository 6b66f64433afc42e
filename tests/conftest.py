"""Pytest configuration and fixtures for BA Survey tests."""
import io
import pytest
from datetime import datetime
from PIL import Image

from shared.schemas import APP_TIMEZONE
from shared.validation import validate_survey


@pytest.fixture
def survey_date():
    """A fixed Monday so the rendered date is predictable."""
    return datetime(2026, 10, 19, 9, 30, tzinfo=APP_TIMEZONE)


@pytest.fixture
def candidate():
    """A new-connection survey with no id, notes or signatures."""
    return {
        'application_type': 'Pasang Baru',
        'tariff_class': 'R1 / 1300VA',
        'customer_id': '',
        'customer_name': 'PT. Mekarjaya Propertindo',
        'address': 'Kp. Cihaseum',
        'site_assessment': 'Layak Pasang',
        'meter_location': 'Persil',
        'substation_construction_responsibility': 'Pelanggan',
        'notes': '',
        'obligations': {
            'network_extension_mv': False,
            'build_substation': False,
            'network_extension_lv': False,
            'pole_installation': False,
            'fee_applies': False,
        },
    }


@pytest.fixture
def record(candidate, survey_date):
    """The candidate, validated with a fixed survey date."""
    return validate_survey(candidate, timestamp=survey_date)


@pytest.fixture
def signature_png():
    """A small transparent PNG with one black stroke, as a signature pad produces."""
    img = Image.new('RGBA', (60, 20), (0, 0, 0, 0))
    for x in range(5, 55):
        img.putpixel((x, 10), (0, 0, 0, 255))
    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def signature_data_url():
    return 'data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=='
