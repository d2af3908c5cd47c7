"""Tests for geocoding and the latest-response-wins sequencer."""
import logging
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from route_sketch.config import Settings
from route_sketch.core.geocode import LatestWins, geocode
from route_sketch.errors import TransientIOError


def _client(payload=None, status_error=None, request_error=None):
    response = MagicMock()
    response.json = MagicMock(return_value=payload)
    response.raise_for_status = MagicMock()
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    client = AsyncMock()
    if request_error is not None:
        client.get = AsyncMock(side_effect=request_error)
    else:
        client.get = AsyncMock(return_value=response)
    return client


def test_geocode_module_has_logger():
    import route_sketch.core.geocode as geocode_mod
    assert hasattr(geocode_mod, "logger")


@pytest.mark.anyio
async def test_geocode_returns_first_result():
    client = _client([{"lat": "14.5826", "lon": "120.9787", "display_name": "Rizal Park"}])
    settings = Settings(store_path="memory")
    result = await geocode("Rizal Park", settings, client=client)
    assert result.lat == pytest.approx(14.5826)
    assert result.lng == pytest.approx(120.9787)

    _, kwargs = client.get.call_args
    assert kwargs["params"]["q"] == "Rizal Park"
    assert kwargs["headers"]["User-Agent"] == settings.user_agent


@pytest.mark.anyio
async def test_geocode_not_found_returns_none():
    assert await geocode("nowhere", client=_client([])) is None


@pytest.mark.anyio
async def test_geocode_http_error_is_transient(caplog):
    error = httpx.HTTPStatusError("busy", request=MagicMock(), response=MagicMock(status_code=503))
    with caplog.at_level(logging.WARNING, logger="route_sketch.core.geocode"):
        with pytest.raises(TransientIOError, match="503"):
            await geocode("x", client=_client([], status_error=error))
    assert any("503" in r.message for r in caplog.records)


@pytest.mark.anyio
async def test_geocode_network_error_is_transient_and_not_retried():
    client = _client(request_error=httpx.ConnectError("down"))
    with pytest.raises(TransientIOError):
        await geocode("x", client=client)
    assert client.get.await_count == 1


@pytest.mark.anyio
async def test_geocode_malformed_result():
    with pytest.raises(TransientIOError):
        await geocode("x", client=_client([{"display_name": "no coords"}]))


class TestLatestWins:
    def test_in_order_responses_all_apply(self):
        lw = LatestWins()
        first, second = lw.begin(), lw.begin()
        assert lw.offer(first, "a")
        assert lw.offer(second, "b")
        assert lw.value == "b"

    def test_stale_response_is_discarded(self):
        lw = LatestWins()
        first, second = lw.begin(), lw.begin()
        assert lw.offer(second, "new")
        assert not lw.offer(first, "old")
        assert lw.value == "new"

    def test_superseded_only_after_newer_response_applies(self):
        lw = LatestWins()
        first, second = lw.begin(), lw.begin()
        assert not lw.superseded(first)
        assert lw.offer(second, "new")
        assert lw.superseded(first)
        assert not lw.superseded(second)
