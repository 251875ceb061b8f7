"""
Pydantic schemas for data validation and serialization.

This package defines Pydantic models for the JSON payloads exchanged with
geodienste.ch:

Schemas:
    geodienste: Topic catalog, export start and export status payloads

Features:
    - Automatic data validation
    - Type coercion and conversion (enums, timestamps)
    - JSON serialization/deserialization using the service's field names

Usage:
    from schemas.geodienste import Topic, GeodiensteStatusSuccess

Example:
    payload = GeodiensteStatusSuccess.model_validate_json(response.text)

    if payload.status == GeodiensteStatus.SUCCESS:
        # download_url and exported_at are guaranteed to be set
        print(payload.download_url)

Validation:
    A status payload whose download fields disagree with its status is
    rejected with a pydantic ValidationError.
"""

__all__ = [
    "Topic",
    "GeodiensteInfoData",
    "GeodiensteExportSuccess",
    "GeodiensteExportError",
    "GeodiensteStatusSuccess",
]
