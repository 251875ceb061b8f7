# ============================================================================
# File: geodienste/exporter.py
# Description: Drives one topic through start, status and download
# ============================================================================
"""
Topic Exporter - Orchestrates the export cycle of a single topic.

This module chains the geodienste.ch exchanges for one topic:
- Start the export (waiting while another export is pending)
- Poll the status until the job is terminal
- Download and extract the finished export

The API client returns HTTP responses; this is where unusable terminal
responses become exceptions with structured context.
"""

import asyncio
import httpx
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from pydantic import ValidationError

from core.config import settings
from core.exceptions import (
    GeodatenbezugException,
    ExportError,
    ExportStartError,
    ExportStatusError,
    ExportFailedError,
    ExportTimeoutError,
)
from geodienste.api import GeodiensteApi
from geodienste.download import download_export
from geodienste.responses import is_export_conflict, is_success, read_status
from models.base import BaseTopic, GeodiensteStatus
from schemas.geodienste import Topic

logger = logging.getLogger(__name__)

# Topics whose processing also needs the data of another topic of the same canton
COMPANION_TOPICS = {
    BaseTopic.LWB_NUTZUNGSFLAECHEN: [BaseTopic.LWB_BEWIRTSCHAFTUNGSEINHEIT],
}


class TopicExporter:
    """
    Export orchestrator for single topics.

    Responsibilities:
    - Start → Status → Download for one topic and its companion topics
    - Translate terminal responses into exceptions
    - Report a result per topic without aborting the caller's run
    """

    def __init__(self, api: GeodiensteApi, data_directory: Optional[Path] = None):
        self.api = api
        self.data_directory = Path(data_directory or settings.DATA_DIRECTORY)

    def _context(self, topic: Topic, **extra) -> Dict[str, Any]:
        return {"topic": topic.topic_title, "canton": topic.canton.value, **extra}

    async def export_topic(self, topic: Topic, token: str) -> str:
        """
        Export a topic and return its download URL.

        Raises:
            ExportStartError: If the start response is not a success
            ExportStatusError: If the status response is not a success or not a status payload
            ExportFailedError: If the job ended with status error
            ExportTimeoutError: If the attempt limit was reached
        """
        start_response = await self.api.start_export(topic, token)

        if is_export_conflict(start_response):
            raise ExportTimeoutError(
                "Another export is still pending",
                context=self._context(topic, phase="start")
            )

        if not is_success(start_response):
            raise ExportStartError(
                f"Export could not be started ({start_response.status_code})",
                context=self._context(
                    topic,
                    status_code=start_response.status_code,
                    response_body=start_response.text[:500]
                )
            )

        try:
            status_response = await self.api.check_export_status(topic, token)

            if not is_success(status_response):
                raise ExportStatusError(
                    f"Export status could not be checked ({status_response.status_code})",
                    context=self._context(topic, status_code=status_response.status_code)
                )

            payload = read_status(status_response)

        except ValidationError as e:
            raise ExportStatusError(
                "Export status response is not a valid status payload",
                context=self._context(topic),
                original_exception=e
            )

        if payload.status == GeodiensteStatus.SUCCESS:
            return payload.download_url

        if payload.status == GeodiensteStatus.ERROR:
            raise ExportFailedError(
                "Export finished with status error",
                context=self._context(topic, info=payload.info)
            )

        raise ExportTimeoutError(
            f"Export is still {payload.status.value}",
            context=self._context(topic, phase="status", last_status=payload.status.value)
        )

    def topic_directory(self, topic: Topic) -> Path:
        return self.data_directory / topic.base_topic.value / topic.canton.value

    def companion_topics(self, topic: Topic) -> List[Topic]:
        """Topics of the same canton that are exported together with the given topic"""
        return [
            Topic.for_base_topic(base_topic, topic.canton)
            for base_topic in COMPANION_TOPICS.get(topic.base_topic, [])
        ]

    async def _download_topic(self, topic: Topic, token: str) -> Path:
        download_url = await self.export_topic(topic, token)
        return await download_export(
            download_url,
            self.topic_directory(topic),
            client_factory=self.api.client_factory
        )

    async def prepare_topic(self, topic: Topic, token: str) -> List[Path]:
        """
        Export a topic and its companion topics concurrently and download the results.

        Returns:
            Data directories, the topic's own directory first
        """
        topics = [topic] + self.companion_topics(topic)
        results = await asyncio.gather(
            *(self._download_topic(item, token) for item in topics),
            return_exceptions=True
        )

        # All exports have finished; raise the first failure
        for outcome in results:
            if isinstance(outcome, BaseException):
                raise outcome

        return list(results)

    async def run(self, topic: Topic, token: str) -> Dict[str, Any]:
        """
        Run the full export cycle for a topic.

        Args:
            topic: Topic to export
            token: Access token of the topic's canton

        Returns:
            Dictionary with the outcome:
            - status: "success" or "failed"
            - topic: Title of the topic
            - canton: Canton of the topic
            - data_path: Directory with the extracted data (success only)
            - companion_data_paths: Directories of the companion topics (success only)
            - error: Exception details (failed only)
        """
        result = {
            "topic": topic.topic_title,
            "canton": topic.canton.value,
        }

        try:
            data_path, *companion_paths = await self.prepare_topic(topic, token)

        except GeodatenbezugException as e:
            logger.error(
                f"Export von {topic.topic_title} ({topic.canton.value}) fehlgeschlagen: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            return {**result, "status": "failed", "error": e.to_dict()}

        except httpx.HTTPError as e:
            error = ExportError(
                "Network error during export",
                context=self._context(topic),
                original_exception=e
            )
            logger.error(
                f"Export von {topic.topic_title} ({topic.canton.value}) fehlgeschlagen: {e}",
                extra={"error_context": error.to_dict()}
            )
            return {**result, "status": "failed", "error": error.to_dict()}

        logger.info(f"Export von {topic.topic_title} ({topic.canton.value}) abgeschlossen: {data_path}")
        return {
            **result,
            "status": "success",
            "data_path": str(data_path),
            "companion_data_paths": [str(path) for path in companion_paths],
        }
