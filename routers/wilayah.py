"""Address lookups proxied from wilayah.id -- public, the registration form needs them."""

from fastapi import APIRouter

import wilayah
from schemas import WilayahItem

router = APIRouter()


@router.get("/provinces", response_model=list[WilayahItem], tags=["wilayah"])
def list_provinces():
    return wilayah.provinces()


@router.get("/provinces/{province_id}/cities", response_model=list[WilayahItem], tags=["wilayah"])
def list_cities(province_id: str):
    return wilayah.cities(province_id)


@router.get("/cities/{city_id}/districts", response_model=list[WilayahItem], tags=["wilayah"])
def list_districts(city_id: str):
    return wilayah.districts(city_id)


@router.get("/districts/{district_id}/villages", response_model=list[WilayahItem], tags=["wilayah"])
def list_villages(district_id: str):
    return wilayah.villages(district_id)
