"""
Script to export all topics with a configured access token
"""

import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, geodienste, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.exceptions import ConfigurationError
from core.logging import setup_logging
from geodienste.api import GeodiensteApi
from geodienste.exporter import TopicExporter

logger = logging.getLogger(__name__)


async def run_export() -> int:
    """Export every topic of the catalog; returns the number of failed topics"""

    api = GeodiensteApi()
    exporter = TopicExporter(api)

    topics = await api.request_topic_info()
    if not topics:
        logger.warning("Keine Themen verfügbar. Export wird übersprungen.")
        return 0

    failed = 0
    for topic in topics:
        try:
            token = settings.token_for(topic.canton.value)
        except ConfigurationError:
            logger.warning(f"Kein Token für {topic.canton.value} konfiguriert. {topic.topic_title} wird übersprungen.")
            continue

        result = await exporter.run(topic, token)
        if result["status"] != "success":
            failed += 1

    logger.info(f"Alle Exporte abgeschlossen ({failed} fehlgeschlagen)")
    return failed


if __name__ == "__main__":
    setup_logging()
    try:
        failed_topics = asyncio.run(run_export())
    except Exception as e:
        logger.error(f"Export pipeline error: {str(e)}")
        sys.exit(1)
    sys.exit(1 if failed_topics else 0)
