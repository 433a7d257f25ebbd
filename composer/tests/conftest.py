import pytest

from composer.models.service_node import Service

import builders


@pytest.fixture
def sample_services() -> list[Service]:
    return builders.sample_services()
