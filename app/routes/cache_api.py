"""API routes for cache management."""

from fastapi import APIRouter, HTTPException, Depends, Path
import structlog

from app.models import (
    AddEntityRequest,
    CachedEntity,
    CacheSizeResponse,
    CacheStatsResponse,
    EntityResponse,
    ErrorResponse,
    MessageResponse
)
from app.services.caching_service import CachingService, get_caching_service

logger = structlog.get_logger()

router = APIRouter(prefix="/api/cache", tags=["Cache"])


@router.post(
    "/add",
    response_model=EntityResponse,
    status_code=201,
    summary="Add an entity to cache",
    description="Add or overwrite an entity. The entity is written through to the database."
)
def add_entity(
    body: AddEntityRequest,
    service: CachingService = Depends(get_caching_service)
):
    """Add an entity to the cache."""
    saved = service.put(CachedEntity(id=body.id, data=body.data))
    return EntityResponse(id=saved.id, data=saved.data)


@router.get(
    "/get/{entity_id}",
    response_model=EntityResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get an entity from cache or database",
    description="Return a cached entity, loading it from the database on a cache miss"
)
def get_entity(
    entity_id: int = Path(..., description="Entity ID"),
    service: CachingService = Depends(get_caching_service)
):
    """Get an entity by ID."""
    entity = service.get(entity_id)
    if entity is None:
        raise HTTPException(
            status_code=404,
            detail={
                "error_code": "NOT_FOUND",
                "error_message": f"Entity with ID {entity_id} not found."
            }
        )
    return EntityResponse(id=entity.id, data=entity.data)


@router.delete(
    "/remove/{entity_id}",
    response_model=MessageResponse,
    summary="Remove an entity from cache and database",
    description="Delete an entity everywhere. Removing an unknown ID is not an error."
)
def remove_entity(
    entity_id: int = Path(..., description="Entity ID"),
    service: CachingService = Depends(get_caching_service)
):
    """Remove an entity from the cache and the database."""
    if service.delete(entity_id):
        return MessageResponse(message=f"Entity with ID {entity_id} removed from cache and database.")
    return MessageResponse(message=f"Entity with ID {entity_id} did not exist.")


@router.delete(
    "/removeAll",
    response_model=MessageResponse,
    summary="Remove all entities from cache and database"
)
def remove_all_entities(service: CachingService = Depends(get_caching_service)):
    """Remove every entity from the cache and the database."""
    service.clear_all()
    return MessageResponse(message="All entities removed from cache and database.")


@router.post(
    "/clearCache",
    response_model=MessageResponse,
    summary="Clear all entities from cache",
    description="Empty the in-memory cache. Entities stay in the database and are reloaded on demand."
)
def clear_cache(service: CachingService = Depends(get_caching_service)):
    """Clear the in-memory cache only."""
    service.clear_cache()
    return MessageResponse(message="Cache cleared successfully.")


@router.get(
    "/size",
    response_model=CacheSizeResponse,
    summary="Get the number of cached entities"
)
def get_cache_size(service: CachingService = Depends(get_caching_service)):
    """Get the resident entity count and capacity."""
    return CacheSizeResponse(size=service.size(), max_size=service.max_cache_size)


@router.get(
    "/stats",
    response_model=CacheStatsResponse,
    summary="Get cache statistics"
)
def get_cache_stats(service: CachingService = Depends(get_caching_service)):
    """Get size and hit/miss/eviction counters."""
    stats = service.stats()
    return CacheStatsResponse(
        size=stats.size,
        max_size=stats.max_size,
        hits=stats.hits,
        misses=stats.misses,
        evictions=stats.evictions
    )
