"""
geodienste.ch API client with bounded waiting on export conflicts and running jobs.

This module drives the three exchanges with geodienste.ch:
- Topic info: one request, failures are logged and yield an empty catalog
- Export start: retried while another export of the account is pending
- Export status: retried while the job is queued or working

Start and status calls always return the terminal HTTP response. Exhausting
the attempt limit is logged as an error and the last response is returned,
so callers branch on one uniform result.
"""

import asyncio
import httpx
import logging
from datetime import timedelta
from typing import Callable, List, Optional
from pydantic import ValidationError

from core.config import settings
from geodienste.responses import is_export_conflict, is_success, read_status
from geodienste.wait import FixedWaitStrategy, WaitStrategy
from models.base import BaseTopic, Canton, GeodiensteStatus
from schemas.geodienste import GeodiensteInfoData, Topic

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], httpx.AsyncClient]

# Log wording is fixed at "1 Minute" regardless of the configured wait strategy
RETRY_MESSAGES = {
    GeodiensteStatus.QUEUED: "Export ist in der Warteschlange. Versuche es in 1 Minute erneut.",
    GeodiensteStatus.WORKING: "Export ist in Bearbeitung. Versuche es in 1 Minute erneut.",
}

STATUS_LABELS = {
    GeodiensteStatus.QUEUED: "in der Warteschlange",
    GeodiensteStatus.WORKING: "in Bearbeitung",
}


def default_client_factory() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT)


class GeodiensteApi:
    """
    Client for the info, export and status endpoints of geodienste.ch.

    The client keeps no state between calls. The attempt counter of a
    start or status call lives in that call only, so concurrent calls for
    different topics are independent.

    Attributes:
        base_url: Base URL of the service (default: settings.GEODIENSTE_BASE_URL)
        client_factory: Creates the HTTP client used for one top-level call
        wait_strategy: Supplies the delay between attempts (default: one minute)
        max_attempts: Requests per start/status call, including the first (default: 10)
    """

    def __init__(
        self,
        client_factory: Optional[ClientFactory] = None,
        wait_strategy: Optional[WaitStrategy] = None,
        base_url: Optional[str] = None,
        max_attempts: Optional[int] = None,
        language: Optional[str] = None
    ):
        self.client_factory = client_factory or default_client_factory
        self.wait_strategy = wait_strategy or FixedWaitStrategy(
            timedelta(seconds=settings.EXPORT_WAIT_SECONDS)
        )
        self.base_url = (base_url or settings.GEODIENSTE_BASE_URL).rstrip("/")
        self.max_attempts = max_attempts if max_attempts is not None else settings.EXPORT_MAX_ATTEMPTS
        self.language = language or settings.GEODIENSTE_LANGUAGE

        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def get_wait_duration(self) -> timedelta:
        """Delay between two attempts"""
        return self.wait_strategy.get_wait_duration()

    async def _wait(self):
        await asyncio.sleep(self.get_wait_duration().total_seconds())

    # ------------------------------------------------------------------
    # URLs
    # ------------------------------------------------------------------

    def topic_info_url(self) -> str:
        base_topics = ",".join(base_topic.value for base_topic in BaseTopic)
        topics = ",".join(base_topic.topic_name for base_topic in BaseTopic)
        cantons = ",".join(canton.value for canton in Canton)
        return (
            f"{self.base_url}/info/services.json"
            f"?base_topics={base_topics}"
            f"&topics={topics}"
            f"&cantons={cantons}"
            f"&language={self.language}"
        )

    def export_url(self, topic: Topic, token: str) -> str:
        return f"{self.base_url}/downloads/{topic.base_topic.value}/{token}/export.json"

    def status_url(self, topic: Topic, token: str) -> str:
        return f"{self.base_url}/downloads/{topic.base_topic.value}/{token}/status.json"

    # ------------------------------------------------------------------
    # Exchanges
    # ------------------------------------------------------------------

    async def request_topic_info(self) -> List[Topic]:
        """
        Get the information about all topics from geodienste.ch.

        Returns:
            List of topics, or an empty list if the request or parsing fails
        """
        url = self.topic_info_url()
        logger.info(f"Rufe die Themeninformationen ab: {url}")

        try:
            async with self.client_factory() as client:
                response = await client.get(url)
                response.raise_for_status()

            info = GeodiensteInfoData.model_validate_json(response.content)
            return info.services

        except (httpx.HTTPError, ValidationError) as e:
            logger.error(f"Fehler beim Abrufen der Themeninformationen von geodienste.ch: {e}")
            return []

    async def start_export(self, topic: Topic, token: str, attempts: int = 0) -> httpx.Response:
        """
        Start the export of a topic.

        Retries while another export of the account is pending. Every other
        response, including authentication failures, is returned as-is.

        Args:
            topic: Topic to export
            token: Access token of the topic's canton
            attempts: Number of attempts already made

        Returns:
            The terminal HTTP response; a still conflicted response once
            the attempt limit is reached

        Raises:
            httpx.HTTPError: On transport failures
        """
        url = self.export_url(topic, token)
        if attempts == 0:
            logger.info(f"Starte den Datenexport für {topic.topic_title} ({topic.canton.value}) mit {url}...")

        attempt = attempts
        async with self.client_factory() as client:
            while True:
                response = await client.get(url)

                if not is_export_conflict(response):
                    return response

                if attempt >= self.max_attempts - 1:
                    logger.error("Es läuft bereits ein anderer Export. Zeitlimite überschritten.")
                    return response

                logger.info("Es läuft gerade ein anderer Export. Versuche es in 1 Minute erneut.")
                await self._wait()
                attempt += 1

    async def check_export_status(self, topic: Topic, token: str, attempts: int = 0) -> httpx.Response:
        """
        Check the status of the export of a topic.

        Retries while the job is queued or working. Non-success HTTP codes
        and the terminal job states success and error are returned as-is.

        Args:
            topic: Topic whose export is checked
            token: Access token of the topic's canton
            attempts: Number of attempts already made

        Returns:
            The terminal HTTP response; a queued or working payload once
            the attempt limit is reached

        Raises:
            httpx.HTTPError: On transport failures
            pydantic.ValidationError: If a success response is not a status payload
        """
        url = self.status_url(topic, token)
        if attempts == 0:
            logger.info(f"Prüfe den Status des Datenexports für {topic.topic_title} ({topic.canton.value}) mit {url}...")

        attempt = attempts
        async with self.client_factory() as client:
            while True:
                response = await client.get(url)

                if not is_success(response):
                    return response

                status = read_status(response).status
                if status.is_terminal:
                    return response

                if attempt >= self.max_attempts - 1:
                    logger.error(f"Zeitlimite überschritten. Status ist {STATUS_LABELS[status]}")
                    return response

                logger.info(RETRY_MESSAGES[status])
                await self._wait()
                attempt += 1
