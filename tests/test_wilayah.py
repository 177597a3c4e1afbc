"""Tests for the wilayah.id geography client and its public endpoints."""

from unittest.mock import MagicMock, patch

import pytest
import requests

import wilayah
from errors import UpstreamError


def _response(status_code: int = 200, body=None, json_error: bool = False) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = body
    return response


def test_provinces_normalized():
    body = {"data": [{"code": "31", "name": "DKI JAKARTA"}, {"code": "32", "name": "JAWA BARAT"}]}
    with patch("wilayah.requests.get", return_value=_response(body=body)) as get:
        result = wilayah.provinces()
    assert result == [{"id": "31", "name": "DKI JAKARTA"}, {"id": "32", "name": "JAWA BARAT"}]
    assert get.call_args.args[0] == "https://wilayah.test/api/provinces.json"
    assert get.call_args.kwargs["timeout"] == wilayah.WILAYAH_TIMEOUT_SECONDS


def test_child_levels_hit_expected_paths():
    body = {"data": [{"code": "31.71", "name": "KOTA ADMINISTRASI JAKARTA PUSAT"}]}
    with patch("wilayah.requests.get", return_value=_response(body=body)) as get:
        wilayah.cities("31")
        wilayah.districts("31.71")
        wilayah.villages("31.71.01")
    urls = [c.args[0] for c in get.call_args_list]
    assert urls == [
        "https://wilayah.test/api/regencies/31.json",
        "https://wilayah.test/api/districts/31.71.json",
        "https://wilayah.test/api/villages/31.71.01.json",
    ]


def test_bare_list_with_numeric_ids_accepted():
    with patch("wilayah.requests.get", return_value=_response(body=[{"id": 11, "name": "ACEH"}])):
        assert wilayah.provinces() == [{"id": "11", "name": "ACEH"}]


def test_empty_list_is_not_an_error():
    with patch("wilayah.requests.get", return_value=_response(body={"data": []})):
        assert wilayah.villages("99.99.99") == []


def test_http_error_raises_upstream():
    with patch("wilayah.requests.get", return_value=_response(status_code=503)):
        with pytest.raises(UpstreamError) as exc_info:
            wilayah.provinces()
    assert exc_info.value.upstream_status == 503


def test_transport_error_raises_upstream():
    with patch("wilayah.requests.get", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(UpstreamError):
            wilayah.provinces()


@pytest.mark.parametrize(
    "body",
    [{"unexpected": True}, {"data": ["31"]}, {"data": [{"code": "31"}]}, "oops"],
)
def test_malformed_body_raises_upstream(body):
    with patch("wilayah.requests.get", return_value=_response(body=body)):
        with pytest.raises(UpstreamError):
            wilayah.provinces()


def test_invalid_json_raises_upstream():
    with patch("wilayah.requests.get", return_value=_response(json_error=True)):
        with pytest.raises(UpstreamError):
            wilayah.provinces()


def test_endpoint_is_public(client):
    body = {"data": [{"code": "31.71.01", "name": "GAMBIR"}]}
    with patch("wilayah.requests.get", return_value=_response(body=body)):
        r = client.get("/wilayah/cities/31.71/districts")
    assert r.status_code == 200
    assert r.json() == [{"id": "31.71.01", "name": "GAMBIR"}]


def test_endpoint_maps_upstream_failure_to_502(client):
    with patch("wilayah.requests.get", side_effect=requests.Timeout("slow")):
        r = client.get("/wilayah/provinces")
    assert r.status_code == 502
    assert r.json()["error"] == "upstream_error"
