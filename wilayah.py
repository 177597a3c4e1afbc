"""
Client for the wilayah.id address hierarchy:
province -> city/regency -> district -> village.

Used only to populate employee address dropdowns. The third party returns
``{"data": [{"code": ..., "name": ...}]}``; callers get ``{"id", "name"}``.
No retry and no cache -- failures surface as UpstreamError.
"""

import requests
import structlog

from config import WILAYAH_TIMEOUT_SECONDS
from errors import UpstreamError
from settings import settings

log = structlog.get_logger(__name__)


def _fetch(path: str) -> list[dict]:
    url = f"{settings.WILAYAH_API_URL.rstrip('/')}/{path}"
    try:
        response = requests.get(url, timeout=WILAYAH_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        log.warning("wilayah.transport_error", url=url, error=str(e))
        raise UpstreamError(f"Geography service unreachable: {e}") from e

    if not response.ok:
        log.warning("wilayah.http_error", url=url, status=response.status_code)
        raise UpstreamError(
            f"Geography service returned {response.status_code} for {path}",
            upstream_status=response.status_code,
        )

    try:
        body = response.json()
    except ValueError as e:
        raise UpstreamError(f"Geography service sent invalid JSON for {path}") from e
    return _normalize(body, path)


def _normalize(body, path: str) -> list[dict]:
    items = body.get("data") if isinstance(body, dict) else body
    if not isinstance(items, list):
        raise UpstreamError(f"Unexpected geography response shape for {path}")

    result = []
    for item in items:
        if not isinstance(item, dict):
            raise UpstreamError(f"Unexpected geography item for {path}")
        code = item.get("code", item.get("id"))
        name = item.get("name")
        if code is None or not name:
            raise UpstreamError(f"Geography item missing code/name for {path}")
        result.append({"id": str(code), "name": str(name)})
    return result


def provinces() -> list[dict]:
    return _fetch("provinces.json")


def cities(province_id: str) -> list[dict]:
    return _fetch(f"regencies/{province_id}.json")


def districts(city_id: str) -> list[dict]:
    return _fetch(f"districts/{city_id}.json")


def villages(district_id: str) -> list[dict]:
    return _fetch(f"villages/{district_id}.json")
