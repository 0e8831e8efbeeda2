"""
HerbScape Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models for catalog records, identification results, toasts
       and the JSON API contract.
How:   FastAPI validates request bodies against these models and serializes
       responses from them; catalog components keep their state in them.
Who:   Services (building records), components (state), routes (responses).
"""

import uuid
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Domain Records
# ══════════════════════════════════════════════════════════════════════════


class HerbRecord(BaseModel):
    """
    What:  A herb as displayed by the catalog grid.
    Who:   Built from `Herb` ORM rows, or from translate-plant answers.

    `id` is kept as a string: rows carry UUIDs while translated records come
    back from the edge function as JSON.
    """
    id: str = Field(description="Herb identifier")
    name: str = Field(description="Display name")
    scientific_name: Optional[str] = Field(default=None, description="Latin binomial, if known")
    description: str = Field(default="", description="Free-text description")
    category: str = Field(default="", description="Category label")
    image_url: Optional[str] = Field(default=None, description="Image reference")
    benefits: List[str] = Field(default_factory=list, description="Benefit strings")

    model_config = {"from_attributes": True}

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        if isinstance(v, uuid.UUID):
            return str(v)
        return v

    @field_validator("benefits", mode="before")
    @classmethod
    def coerce_benefits(cls, v: Any) -> List[str]:
        return list(v) if v else []


class IdentificationResult(BaseModel):
    """
    What:  Top suggestion of one plant identification call.
    When:  Built by FunctionsClient.identify_plant(); never persisted.
    """
    common_names: List[str] = Field(default_factory=list)
    scientific_name: Optional[str] = None
    probability: Optional[float] = Field(default=None, description="Confidence in 0..1")
    family: Optional[str] = None
    genus: Optional[str] = None
    description: Optional[str] = Field(default=None, description="Encyclopedia snippet")

    @property
    def confidence_text(self) -> Optional[str]:
        """Probability as a percentage with one decimal place, e.g. '87.3%'."""
        if not self.probability:
            return None
        return f"{self.probability * 100:.1f}%"

    @property
    def has_taxonomy(self) -> bool:
        return bool(self.family or self.genus)


class SessionUser(BaseModel):
    """What: The signed-in user as seen by the page; sourced from Supabase auth."""
    id: str
    email: Optional[str] = None
    is_admin: bool = False


class Toast(BaseModel):
    """
    What:  A transient user-facing notification.
    How:   Queued by components, drained by the next render/response.
    """
    title: str
    description: Optional[str] = None
    variant: str = Field(default="default", description="default | destructive")


# ══════════════════════════════════════════════════════════════════════════
# API Models
# ══════════════════════════════════════════════════════════════════════════


class CatalogResponse(BaseModel):
    """Returned by GET /api/herbs: the filtered grid plus page state."""
    herbs: List[HerbRecord]
    categories: List[str]
    query: str
    category: str
    locale: str
    is_loading: bool
    is_translating: bool = False
    user: Optional[SessionUser] = None
    toasts: List[Toast] = Field(default_factory=list)


class ScanResponse(BaseModel):
    """Returned by POST /api/identify."""
    dialog_open: bool
    is_scanning: bool
    image_preview: Optional[str] = None
    result: Optional[IdentificationResult] = None
    confidence_text: Optional[str] = None
    toasts: List[Toast] = Field(default_factory=list)


class RemedyRequest(BaseModel):
    """Body of POST /api/remedies; the text is forwarded untouched."""
    message: str = Field(default="", description="Free-text symptom description")


class RemedyResponse(BaseModel):
    response: str
    is_loading: bool
    toasts: List[Toast] = Field(default_factory=list)


class AccessTokenRequest(BaseModel):
    """Body of POST /api/auth/session: a Supabase access token from the sign-in page."""
    access_token: str = Field(min_length=1)


class SessionResponse(BaseModel):
    user: Optional[SessionUser] = None
    toasts: List[Toast] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "The requested remedies widget was not found",
            "request_id": "1f0c2a9b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    supabase: str = Field(description="Supabase configuration: configured, not_configured")
    catalog_variant: str = Field(description="Served page composition: full or basic")
    active_clients: int = Field(description="Client page states held in memory")
    uptime_seconds: float = Field(description="Seconds since service started")
