"""
Client components for the geodienste.ch export service.

This package contains everything needed to drive a topic export:

Modules:
    api: Topic info, export start and export status exchanges
    wait: Wait strategies between attempts
    responses: Shared interpretation of service responses
    download: Download and extraction of finished exports
    exporter: Orchestrator chaining start, status and download for one topic

Architecture:
    The export cycle of a topic follows three steps:

    1. Start - Start the export, waiting while another export is pending
    2. Status - Poll until the job is success or error
    3. Download - Fetch and extract the export artifact

    Steps 1 and 2 retry at most EXPORT_MAX_ATTEMPTS times and always
    return the terminal HTTP response.

Usage:
    from geodienste.api import GeodiensteApi
    from geodienste.exporter import TopicExporter

Example:
    api = GeodiensteApi()
    topics = await api.request_topic_info()

    exporter = TopicExporter(api, data_directory=Path("data"))
    result = await exporter.run(topics[0], token="...")

    print(f"{result['topic']}: {result['status']}")

Testing:
    Inject NoWaitStrategy and a client factory backed by
    httpx.MockTransport to run the retry loops without sleeping.
"""

__all__ = [
    "GeodiensteApi",
    "TopicExporter",
    "WaitStrategy",
    "FixedWaitStrategy",
    "NoWaitStrategy",
    "download_export",
]
