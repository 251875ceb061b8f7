"""
Download and extraction of finished exports.
"""

import httpx
import logging
import zipfile
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import urlparse

from core.config import settings
from core.exceptions import DownloadError

logger = logging.getLogger(__name__)


def _absolute_url(download_url: str) -> str:
    # status.json sometimes reports the download URL without a scheme
    if not urlparse(download_url).scheme:
        return f"https://{download_url.lstrip('/')}"
    return download_url


async def download_export(
    download_url: str,
    destination: Path,
    client_factory: Optional[Callable[[], httpx.AsyncClient]] = None
) -> Path:
    """
    Download the export artifact and extract it.

    Args:
        download_url: download_url of a successful status payload
        destination: Directory the archive is stored and extracted in
        client_factory: Creates the HTTP client (default: httpx.AsyncClient)

    Returns:
        Directory containing the extracted files

    Raises:
        DownloadError: If the download fails or the artifact is not a zip archive
    """
    url = _absolute_url(download_url)
    destination = Path(destination)
    destination.mkdir(parents=True, exist_ok=True)

    archive_name = Path(urlparse(url).path).name or "export.zip"
    archive_path = destination / archive_name
    extract_dir = destination / Path(archive_name).stem

    context = {"download_url": url, "destination": str(destination)}
    logger.info(f"Lade die Daten von {url} herunter...")

    factory = client_factory or (lambda: httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT))
    try:
        try:
            async with factory() as client:
                async with client.stream("GET", url, follow_redirects=True) as response:
                    if not response.is_success:
                        raise DownloadError(
                            f"Download failed with status {response.status_code}",
                            context={**context, "status_code": response.status_code}
                        )
                    with open(archive_path, "wb") as archive:
                        async for chunk in response.aiter_bytes():
                            archive.write(chunk)

        except httpx.HTTPError as e:
            raise DownloadError("Network error during download", context=context, original_exception=e)

        try:
            with zipfile.ZipFile(archive_path) as archive:
                archive.extractall(extract_dir)
        except zipfile.BadZipFile as e:
            raise DownloadError(
                "Downloaded artifact is not a zip archive",
                context={**context, "archive_path": str(archive_path)},
                original_exception=e
            )

    finally:
        # Only the extracted files are kept
        archive_path.unlink(missing_ok=True)

    logger.info(f"Daten nach {extract_dir} entpackt")
    return extract_dir
