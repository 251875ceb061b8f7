# ============================================================================
# File: tests/integration/test_export_flow.py
# ============================================================================

import io
import json
import logging
import zipfile
import pytest
import httpx
from unittest.mock import patch

from core.config import settings
from geodienste.api import GeodiensteApi
from geodienste.wait import NoWaitStrategy
from scripts.run_export import run_export
from tests.helpers import (
    CONFLICT_BODY,
    QUEUED_BODY,
    STARTED_BODY,
    WORKING_BODY,
    client_factory_for,
    json_response,
    messages,
)


class FakeGeodienste:
    """
    Minimal in-memory stand-in for geodienste.ch.

    - One export per token may run at a time
    - A started job reports queued, working, then success
    - Base topics listed in malformed_status answer with an unusable status payload
    """

    def __init__(self, catalog, pending_conflicts=0, malformed_status=()):
        self.catalog = catalog
        self.pending_conflicts = pending_conflicts
        self.malformed_status = set(malformed_status)
        self.jobs = {}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/info/services.json":
            return json_response(200, json.dumps({"services": self.catalog}))

        if path.endswith("/export.json"):
            if self.pending_conflicts:
                self.pending_conflicts -= 1
                return json_response(404, CONFLICT_BODY)
            self.jobs[path.rsplit("/", 1)[0]] = [QUEUED_BODY, WORKING_BODY]
            return json_response(200, STARTED_BODY)

        if path.endswith("/status.json"):
            job = path.rsplit("/", 1)[0]
            if job not in self.jobs:
                return httpx.Response(401)
            base_topic = job.split("/")[2]
            if base_topic in self.malformed_status:
                return json_response(200, '{"status":"success","info":"","download_url":null,"exported_at":null}')
            if self.jobs[job]:
                return json_response(200, self.jobs[job].pop(0))
            return json_response(200, json.dumps({
                "status": "success",
                "info": "Data ready to be downloaded.",
                "download_url": f"geodienste.ch/files/{base_topic}.zip",
                "exported_at": "2024-05-02T08:00:00",
            }))

        if path.startswith("/files/"):
            buffer = io.BytesIO()
            with zipfile.ZipFile(buffer, "w") as archive:
                archive.writestr("data.gpkg", path.encode("utf-8"))
            return httpx.Response(200, content=buffer.getvalue())

        return httpx.Response(404)


CATALOG = [
    {
        "base_topic": "lwb_rebbaukataster",
        "topic": "lwb_rebbaukataster_v2_0",
        "topic_title": "Rebbaukataster",
        "canton": "ZG",
        "updated_at": "2024-05-01T12:00:00",
    },
    {
        "base_topic": "lwb_nutzungsflaechen",
        "topic": "lwb_nutzungsflaechen_v2_0",
        "topic_title": "Nutzungsflächen",
        "canton": "BE",
        "updated_at": None,
    },
]


@pytest.mark.asyncio
async def test_run_export_all_topics(tmp_path, monkeypatch, caplog):
    """
    End-to-end export:
    1. Fetch the catalog
    2. Start each export, waiting out one pending conflict
    3. Poll queued → working → success
    4. Download and extract the data
    Nutzungsflächen also exports its Bewirtschaftungseinheit companion
    """
    caplog.set_level(logging.INFO)
    service = FakeGeodienste(CATALOG, pending_conflicts=1)
    api = GeodiensteApi(
        client_factory=client_factory_for(httpx.MockTransport(service)),
        wait_strategy=NoWaitStrategy(),
        base_url="https://geodienste.ch",
    )
    monkeypatch.setattr(settings, "GEODIENSTE_TOKENS", {"ZG": "token-zg", "BE": "token-be"})
    monkeypatch.setattr(settings, "DATA_DIRECTORY", str(tmp_path))

    with patch("scripts.run_export.GeodiensteApi", return_value=api):
        failed = await run_export()

    assert failed == 0
    assert (tmp_path / "lwb_rebbaukataster" / "ZG" / "lwb_rebbaukataster" / "data.gpkg").exists()
    assert (tmp_path / "lwb_nutzungsflaechen" / "BE" / "lwb_nutzungsflaechen" / "data.gpkg").exists()
    assert (tmp_path / "lwb_bewirtschaftungseinheit" / "BE" / "lwb_bewirtschaftungseinheit" / "data.gpkg").exists()

    info = messages(caplog, "INFO")
    assert info.count("Es läuft gerade ein anderer Export. Versuche es in 1 Minute erneut.") == 1
    assert info.count("Export ist in der Warteschlange. Versuche es in 1 Minute erneut.") == 3
    assert info.count("Export ist in Bearbeitung. Versuche es in 1 Minute erneut.") == 3
    assert messages(caplog, "ERROR") == []


@pytest.mark.asyncio
async def test_run_export_skips_cantons_without_token(tmp_path, monkeypatch, caplog):
    caplog.set_level(logging.INFO)
    service = FakeGeodienste(CATALOG)
    api = GeodiensteApi(
        client_factory=client_factory_for(httpx.MockTransport(service)),
        wait_strategy=NoWaitStrategy(),
        base_url="https://geodienste.ch",
    )
    monkeypatch.setattr(settings, "GEODIENSTE_TOKENS", {"ZG": "token-zg"})
    monkeypatch.setattr(settings, "DATA_DIRECTORY", str(tmp_path))

    with patch("scripts.run_export.GeodiensteApi", return_value=api):
        failed = await run_export()

    assert failed == 0
    assert not any("token-be" in str(request.url) for request in service.requests)
    assert messages(caplog, "WARNING") == [
        "Kein Token für BE konfiguriert. Nutzungsflächen wird übersprungen."
    ]


@pytest.mark.asyncio
async def test_run_export_counts_failed_topics(tmp_path, monkeypatch):
    service = FakeGeodienste(CATALOG, pending_conflicts=100)
    api = GeodiensteApi(
        client_factory=client_factory_for(httpx.MockTransport(service)),
        wait_strategy=NoWaitStrategy(),
        base_url="https://geodienste.ch",
    )
    monkeypatch.setattr(settings, "GEODIENSTE_TOKENS", {"ZG": "token-zg", "BE": "token-be"})
    monkeypatch.setattr(settings, "DATA_DIRECTORY", str(tmp_path))

    with patch("scripts.run_export.GeodiensteApi", return_value=api):
        failed = await run_export()

    assert failed == 2
    assert service.pending_conflicts == 70


@pytest.mark.asyncio
async def test_run_export_without_catalog(monkeypatch):
    api = GeodiensteApi(
        client_factory=client_factory_for(httpx.MockTransport(lambda request: httpx.Response(503))),
        wait_strategy=NoWaitStrategy(),
    )

    with patch("scripts.run_export.GeodiensteApi", return_value=api):
        assert await run_export() == 0


@pytest.mark.asyncio
async def test_run_export_continues_after_malformed_status(tmp_path, monkeypatch, caplog):
    caplog.set_level(logging.INFO)
    service = FakeGeodienste(CATALOG, malformed_status={"lwb_rebbaukataster"})
    api = GeodiensteApi(
        client_factory=client_factory_for(httpx.MockTransport(service)),
        wait_strategy=NoWaitStrategy(),
        base_url="https://geodienste.ch",
    )
    monkeypatch.setattr(settings, "GEODIENSTE_TOKENS", {"ZG": "token-zg", "BE": "token-be"})
    monkeypatch.setattr(settings, "DATA_DIRECTORY", str(tmp_path))

    with patch("scripts.run_export.GeodiensteApi", return_value=api):
        failed = await run_export()

    assert failed == 1
    assert not (tmp_path / "lwb_rebbaukataster" / "ZG").exists()
    assert (tmp_path / "lwb_nutzungsflaechen" / "BE" / "lwb_nutzungsflaechen" / "data.gpkg").exists()
    errors = messages(caplog, "ERROR")
    assert len(errors) == 1
    assert errors[0].startswith("Export von Rebbaukataster (ZG) fehlgeschlagen")
