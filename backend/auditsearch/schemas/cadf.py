"""
CADF event model.

Events are produced and validated upstream; this model only parses them so the
query layer can hand out typed records. Unknown keys are kept as-is.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _CADFModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Host(_CADFModel):
    id: str | None = None
    address: str | None = None
    agent: str | None = None
    platform: str | None = None


class Resource(_CADFModel):
    type_uri: str = Field("", alias="typeURI")
    id: str = ""
    name: str | None = None
    domain: str | None = None
    domain_id: str | None = None
    project_id: str | None = None
    host: Host | None = None


class Address(_CADFModel):
    url: str = ""
    name: str | None = None


class Target(Resource):
    addresses: list[Address] = Field(default_factory=list)


class Reason(_CADFModel):
    reason_type: str = Field("", alias="reasonType")
    reason_code: str = Field("", alias="reasonCode")


class Attachment(_CADFModel):
    name: str | None = None
    type_uri: str = Field("", alias="typeURI")
    content: Any = None


class Event(_CADFModel):
    type_uri: str = Field("http://schemas.dmtf.org/cloud/audit/1.0/event", alias="typeURI")
    id: str
    event_type: str = Field("", alias="eventType")
    event_time: str = Field("", alias="eventTime")
    action: str = ""
    outcome: str = ""
    request_path: str | None = Field(None, alias="requestPath")
    reason: Reason | None = None
    initiator: Resource = Field(default_factory=Resource)
    target: Target = Field(default_factory=Target)
    observer: Resource = Field(default_factory=Resource)
    attachments: list[Attachment] = Field(default_factory=list)


class ResourceRef(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type_uri: str = Field("", alias="typeURI")
    id: str = ""
    name: str | None = None


class EventSummary(BaseModel):
    """List-view projection of an Event."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    time: str
    action: str
    outcome: str
    request_path: str | None = Field(None, alias="requestPath")
    observer: ResourceRef
    initiator: ResourceRef
    target: ResourceRef

    @classmethod
    def from_event(cls, event: Event) -> "EventSummary":
        return cls(
            id=event.id,
            time=event.event_time,
            action=event.action,
            outcome=event.outcome,
            request_path=event.request_path,
            observer=ResourceRef(type_uri=event.observer.type_uri, id=event.observer.id),
            initiator=ResourceRef(
                type_uri=event.initiator.type_uri,
                id=event.initiator.id,
                name=event.initiator.name,
            ),
            target=ResourceRef(type_uri=event.target.type_uri, id=event.target.id),
        )
