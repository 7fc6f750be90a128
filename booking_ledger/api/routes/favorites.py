"""
Favorite trip endpoints for the authenticated user.
"""

from fastapi import APIRouter, Depends, status

from booking_ledger.api.deps import get_catalog, get_current_identity, get_favorites
from booking_ledger.schemas.catalog import FavoriteCreate, FavoriteResponse, TripResponse
from booking_ledger.services.auth_service import Identity
from booking_ledger.services.catalog_service import TripCatalog
from booking_ledger.services.favorites_service import FavoritesService

router = APIRouter(prefix="/favorites", tags=["Favorites"])


@router.post("/", response_model=FavoriteResponse, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    favorite_data: FavoriteCreate,
    identity: Identity = Depends(get_current_identity),
    favorites: FavoritesService = Depends(get_favorites),
):
    favorite = await favorites.add(identity.user_id, favorite_data.trip_id)
    return FavoriteResponse.model_validate(favorite)


@router.get("/", response_model=list[FavoriteResponse])
async def list_favorites(
    identity: Identity = Depends(get_current_identity),
    favorites: FavoritesService = Depends(get_favorites),
    catalog: TripCatalog = Depends(get_catalog),
):
    """Saved trips with their catalog details."""
    results = []
    for favorite in favorites.list_by_owner(identity.user_id):
        trip = catalog.find(favorite.trip_id)
        response = FavoriteResponse.model_validate(favorite)
        response.trip = TripResponse.model_validate(trip) if trip else None
        results.append(response)
    return results


@router.delete("/{favorite_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(
    favorite_id: str,
    identity: Identity = Depends(get_current_identity),
    favorites: FavoritesService = Depends(get_favorites),
):
    await favorites.remove(identity.user_id, favorite_id)
