"""
Pydantic response models for the API.

Field() descriptions and examples feed the OpenAPI docs at /docs.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from charts.donut import DonutGeometry


# ── Budget data ───────────────────────────────────────────────────────────────

class BudgetItemOut(BaseModel):
    """One labeled budget amount, in upstream order."""
    title: str = Field(..., description="Category label (not guaranteed unique)", examples=["Rent"])
    budget: float = Field(..., description="Amount; may be zero or negative", examples=[1200.0])


class BudgetResponse(BaseModel):
    """Response body for GET /api/v1/budget."""
    count: int = Field(..., description="Number of items", examples=[3])
    items: list[BudgetItemOut] = Field(..., description="Budget items in upstream order")


# ── Chart payloads ────────────────────────────────────────────────────────────

class PieChartOut(BaseModel):
    """Parallel lists consumed by the pie renderer."""
    labels: list[str] = Field(..., examples=[["Rent", "Food"]])
    values: list[float] = Field(..., examples=[[1200.0, 400.0]])
    colors: list[str] = Field(..., examples=[["#ffc65d", "#ff6384"]])


class ArcSliceOut(BaseModel):
    index: int
    title: str
    budget: float
    start_angle: float = Field(..., description="Radians, clockwise from twelve o'clock")
    end_angle: float = Field(..., description="Radians, clockwise from twelve o'clock")
    color: str


class LabelPlacementOut(BaseModel):
    text: str = Field(..., examples=["Rent (1200)"])
    anchor_point: list[float] = Field(..., description="[x, y] relative to center")
    text_anchor: str = Field(..., description="start | end", examples=["start"])
    leader_polyline: list[list[float]] = Field(..., description="Centroid, bend and terminal points")


class DonutGeometryOut(BaseModel):
    """Response body for GET /api/v1/charts/donut."""
    width: float
    height: float
    center: list[float]
    outer_radius: float
    inner_radius: float
    slices: list[ArcSliceOut]
    labels: list[LabelPlacementOut]

    @classmethod
    def from_geometry(cls, geometry: DonutGeometry) -> "DonutGeometryOut":
        return cls.model_validate(geometry.to_dict())


# ── Meta ──────────────────────────────────────────────────────────────────────

class HealthOut(BaseModel):
    status: str = Field(..., examples=["ok"])
    endpoint: str = Field(..., examples=["http://localhost:3000/budget"])
    cache: dict[str, int | str] = Field(..., description="Budget cache state and counters")


class ErrorResponse(BaseModel):
    """Standard error response body."""
    error: str = Field(..., description="Short error category", examples=["Bad gateway"])
    detail: str | None = Field(None, description="Extended error detail")
    status_code: int = Field(..., ge=400, le=599, description="HTTP status code", examples=[502])
