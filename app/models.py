"""Domain and request/response models for the caching service."""

from dataclasses import dataclass
from typing import Optional
from pydantic import BaseModel, Field


@dataclass
class CachedEntity:
    """Unit of caching: an id assigned by the durable store and an opaque payload."""
    id: Optional[int]
    data: str


@dataclass
class CacheStats:
    """Point-in-time counters of a cache instance."""
    size: int
    max_size: int
    hits: int
    misses: int
    evictions: int


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error_code: str = Field(..., description="Error code identifier")
    error_message: str = Field(..., description="Human-readable error message")


class AddEntityRequest(BaseModel):
    """Request model for adding an entity to the cache."""

    id: Optional[int] = Field(default=None, ge=1, description="Existing entity ID to overwrite; omitted for new entities")
    data: str = Field(..., min_length=1, description="Entity payload")


class EntityResponse(BaseModel):
    """Response model for a cached entity."""

    id: int = Field(..., description="Entity ID assigned by the durable store")
    data: str = Field(..., description="Entity payload")


class MessageResponse(BaseModel):
    """Response model for operations that only report an outcome."""

    message: str = Field(..., description="Outcome of the operation")


class CacheSizeResponse(BaseModel):
    """Response model for the resident entry count."""

    size: int = Field(..., ge=0, description="Number of entities resident in memory")
    max_size: int = Field(..., gt=0, description="Configured maximum resident entities")


class CacheStatsResponse(BaseModel):
    """Response model for cache statistics."""

    size: int = Field(..., ge=0, description="Number of entities resident in memory")
    max_size: int = Field(..., gt=0, description="Configured maximum resident entities")
    hits: int = Field(..., ge=0, description="Lookups served from memory")
    misses: int = Field(..., ge=0, description="Lookups that fell through to the durable store")
    evictions: int = Field(..., ge=0, description="Entities moved from memory to the durable store")
