"""
Read-only trip catalog endpoints.
"""

from fastapi import APIRouter, Depends

from booking_ledger.api.deps import get_catalog
from booking_ledger.schemas.catalog import TripResponse
from booking_ledger.services.catalog_service import TripCatalog

router = APIRouter(prefix="/trips", tags=["Trips"])


@router.get("/", response_model=list[TripResponse])
async def list_trips(catalog: TripCatalog = Depends(get_catalog)):
    return catalog.all()


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(trip_id: str, catalog: TripCatalog = Depends(get_catalog)):
    return catalog.get(trip_id)
