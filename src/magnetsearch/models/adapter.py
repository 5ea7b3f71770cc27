"""Adapter metadata models — What the registry exposes about each search source."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, computed_field


class AdapterRole(str, Enum):
    """Role an adapter plays in request routing.

    The registry guarantees exactly one ``DEFAULT`` adapter and at most one
    ``FALLBACK`` adapter; everything else is ``STANDARD``.
    """

    DEFAULT = "default"
    FALLBACK = "fallback"
    STANDARD = "standard"


class AdapterInfo(BaseModel):
    """Public description of a configured adapter."""

    id: str = Field(description="Stable adapter identifier")
    name: str = Field(description="Human-readable display name")
    description: str = Field(default="", description="Short description of the source")
    endpoint: str = Field(default="", description="Remote endpoint URI, or 'local-data' for the bundled dataset")
    role: AdapterRole = Field(default=AdapterRole.STANDARD, description="Routing role")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_default(self) -> bool:
        return self.role is AdapterRole.DEFAULT

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_fallback(self) -> bool:
        return self.role is AdapterRole.FALLBACK


class AdapterListResponse(BaseModel):
    """Response of the adapter listing operation."""

    adapters: list[AdapterInfo] = Field(default_factory=list, description="Adapters, default first")
    default_adapter_id: str = Field(description="Id of the default adapter")
    fallback_adapter_id: str | None = Field(default=None, description="Id of the fallback adapter, if any")
