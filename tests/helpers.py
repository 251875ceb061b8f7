"""
Shared payloads and fake transports for the geodienste.ch tests
"""

import io
import json
import zipfile
import httpx
from typing import Callable, Dict, List

TOKEN = "1234567890"

CONFLICT_BODY = '{"error":"Cannot start data export because there is another data export pending"}'
STARTED_BODY = '{"info":"Data export successfully started. Call the URL of status_url to get the current status of the export."}'
QUEUED_BODY = '{"status":"queued","info":"Try again later.","download_url":null,"exported_at":null}'
WORKING_BODY = '{"status":"working","info":"Try again later.","download_url":null,"exported_at":null}'
SUCCESS_BODY = (
    '{"status":"success", "info":"Data ready to be downloaded. Provide your credentials to download the data.", '
    '"download_url":"test.com/data.zip", "exported_at":"2022-03-24T09:31:05.508"}'
)
ERROR_BODY = '{"status":"error","info":"Export failed.","download_url":null,"exported_at":null}'


class ScriptedTransport(httpx.MockTransport):
    """
    Replays a fixed list of responses in order and records the requests.

    Fails the test if more requests are sent than responses were scripted.
    """

    def __init__(self, responses: List[httpx.Response]):
        self.responses = list(responses)
        self.requests: List[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        assert self.responses, f"Unexpected request to {request.url}"
        return self.responses.pop(0)


def json_response(status_code: int, body: str) -> httpx.Response:
    return httpx.Response(status_code, content=body.encode("utf-8"), headers={"Content-Type": "application/json"})


def client_factory_for(transport: httpx.MockTransport) -> Callable[[], httpx.AsyncClient]:
    return lambda: httpx.AsyncClient(transport=transport)


def messages(caplog, level: str) -> List[str]:
    """Messages logged by the application at the given level name"""
    return [
        record.getMessage()
        for record in caplog.records
        if record.levelname == level and not record.name.startswith(("httpx", "httpcore"))
    ]


class RoutedTransport(httpx.MockTransport):
    """
    Replays a separate response list per URL path.

    Concurrent calls for different topics each consume their own list, so
    the order in which their requests interleave does not matter.
    """

    def __init__(self, routes: Dict[str, List[httpx.Response]]):
        self.routes = {path: list(responses) for path, responses in routes.items()}
        self.requests: List[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        remaining = self.routes.get(request.url.path)
        assert remaining, f"Unexpected request to {request.url}"
        return remaining.pop(0)

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]


def status_success_body(download_url: str) -> str:
    return json.dumps({
        "status": "success",
        "info": "Data ready to be downloaded.",
        "download_url": download_url,
        "exported_at": "2024-05-02T08:00:00",
    })


def zip_response(files: Dict[str, bytes]) -> httpx.Response:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return httpx.Response(200, content=buffer.getvalue())
