"""
Pydantic schemas for geodienste.ch request/response payloads
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, List, Tuple
from datetime import datetime
from models.base import BaseTopic, Canton, GeodiensteStatus


# ============================================================================
# Topic Schemas
# ============================================================================

class Topic(BaseModel):
    """
    One exportable geodata product for one canton.

    Identity is the pair (base_topic, canton); instances are immutable and
    hashable so they can be used as dictionary keys by the calling pipeline.
    """

    base_topic: BaseTopic
    topic_name: str = Field("", alias="topic")
    topic_title: str
    canton: Canton
    updated_at: Optional[datetime] = None

    @property
    def key(self) -> Tuple[BaseTopic, Canton]:
        return (self.base_topic, self.canton)

    @classmethod
    def for_base_topic(cls, base_topic: BaseTopic, canton: Canton) -> "Topic":
        """Build a topic that is not part of an info response (e.g. a joined dataset)"""
        return cls(
            base_topic=base_topic,
            topic=base_topic.topic_name,
            topic_title=base_topic.description,
            canton=canton,
        )

    class Config:
        populate_by_name = True
        frozen = True


class GeodiensteInfoData(BaseModel):
    """Response body of info/services.json"""
    services: List[Topic] = Field(default_factory=list)


# ============================================================================
# Export Schemas
# ============================================================================

class GeodiensteExportSuccess(BaseModel):
    """Success response body of downloads/export.json"""
    info: str


class GeodiensteExportError(BaseModel):
    """Error response body of downloads/export.json"""
    error: str


class GeodiensteStatusSuccess(BaseModel):
    """
    Response body of downloads/status.json.

    Ensures:
    - download_url and exported_at are set if and only if status is success
    """

    status: GeodiensteStatus
    info: str = ""
    download_url: Optional[str] = None
    exported_at: Optional[datetime] = None

    @validator("download_url", "exported_at", always=True)
    def only_set_on_success(cls, v, values):
        """Check the download fields against the reported status"""
        status = values.get("status")
        if status is None:
            return v
        if status == GeodiensteStatus.SUCCESS and v is None:
            raise ValueError("must be set when the export succeeded")
        if status != GeodiensteStatus.SUCCESS and v is not None:
            raise ValueError(f"must be empty while the export is {status.value}")
        return v
