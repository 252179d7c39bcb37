"""Vessel request/response models."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from aisviewer.models._base import AisBaseModel
from aisviewer.models.vessel import Vessel
from aisviewer.models.viewport import Bbox


class FetchRequest(BaseModel):
    """Parameters of one vessel poll."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    bbox: Bbox
    zoom: int
    since: str | None = None
    geohashes: tuple[str, ...] = ()

    def to_query(self) -> dict[str, str]:
        params: dict[str, str] = {
            "bbox": self.bbox.as_query(),
            "zoom": str(self.zoom),
        }
        if self.since:
            params["since"] = self.since
        if self.geohashes:
            params["geohashes"] = ",".join(sorted(self.geohashes))
        return params


class VesselsResponse(AisBaseModel):
    """Full or delta vessel list plus the server clock at response time.

    ``server_time`` becomes the ``since`` cursor of the next request.
    """

    vessels: list[Vessel] = Field(default_factory=list)
    server_time: str = Field(validation_alias=AliasChoices("server_time", "serverTime"))
    is_delta: bool = Field(default=False, validation_alias=AliasChoices("is_delta", "isDelta"))

    @field_validator("server_time", mode="before")
    @classmethod
    def _non_empty_server_time(cls, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("server_time must be a non-empty string")
        return value.strip()
