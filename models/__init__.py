"""
Domain enums shared by the geodienste.ch client.

Models:
    base: Dataset families (BaseTopic), cantons (Canton) and the export job
          status (GeodiensteStatus)

Usage:
    from models.base import BaseTopic, Canton, GeodiensteStatus

Example:
    BaseTopic.LWB_REBBAUKATASTER.topic_name   # "lwb_rebbaukataster_v2_0"
    BaseTopic.LWB_REBBAUKATASTER.description  # "Rebbaukataster"
    GeodiensteStatus.WORKING.is_terminal      # False
"""

__all__ = [
    "BaseTopic",
    "Canton",
    "GeodiensteStatus",
]
