"""
Pytest configuration and fixtures
"""

import pytest
import httpx
from datetime import datetime, timedelta
from typing import List
from geodienste.api import GeodiensteApi
from geodienste.wait import NoWaitStrategy
from models.base import BaseTopic, Canton
from schemas.geodienste import Topic
from tests.helpers import TOKEN, ScriptedTransport, client_factory_for


@pytest.fixture
def topic():
    """Topic used by the export tests"""
    return Topic(
        base_topic=BaseTopic.LWB_PERIMETER_LN_SF,
        topic="lwb_perimeter_ln_sf_v2_0",
        topic_title="Perimeter LN- und Sömmerungsflächen",
        canton=Canton.ZG,
        updated_at=datetime.now() - timedelta(hours=23),
    )


@pytest.fixture
def token():
    return TOKEN


@pytest.fixture
def make_api():
    """Build an API client replaying the given responses without waiting"""

    def _make(responses: List[httpx.Response]):
        transport = ScriptedTransport(responses)
        api = GeodiensteApi(
            client_factory=client_factory_for(transport),
            wait_strategy=NoWaitStrategy(),
            base_url="https://geodienste.ch",
            max_attempts=10,
            language="de",
        )
        return api, transport

    return _make
