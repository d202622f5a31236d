from __future__ import annotations

import asyncio
import time

import httpx
import pytest

from framesearch.models.interfaces import ProbeVerdict
from framesearch.tools import frame_probe


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)


async def _probe_with(response: httpx.Response, url: str = "https://example.com") -> ProbeVerdict:
    async with _client(lambda request: response) as client:
        return await frame_probe.probe(url, client=client, timeout=1.0)


@pytest.mark.asyncio
async def test_plain_ok_response_is_displayable():
    assert await _probe_with(httpx.Response(200)) is ProbeVerdict.DISPLAYABLE


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["DENY", "deny", "SameOrigin", " sameorigin "])
@pytest.mark.parametrize("status", [200, 404, 500])
async def test_x_frame_options_blocks_regardless_of_status(value, status):
    verdict = await _probe_with(httpx.Response(status, headers={"X-Frame-Options": value}))
    assert verdict is ProbeVerdict.BLOCKED_BY_HEADER


@pytest.mark.asyncio
async def test_x_frame_options_allow_from_is_not_blocking():
    verdict = await _probe_with(
        httpx.Response(200, headers={"X-Frame-Options": "ALLOW-FROM https://example.org"})
    )
    assert verdict is ProbeVerdict.DISPLAYABLE


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "csp",
    [
        "frame-ancestors 'none'",
        "default-src 'self'; frame-ancestors    'self'",
        "default-src *;frame-ancestors\t'NONE';",
        "FRAME-ANCESTORS 'Self' https://partner.example",
    ],
)
async def test_csp_frame_ancestors_blocks(csp):
    verdict = await _probe_with(httpx.Response(200, headers={"Content-Security-Policy": csp}))
    assert verdict is ProbeVerdict.BLOCKED_BY_HEADER


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "csp",
    [
        "frame-ancestors *",
        "frame-ancestors https://*.example.com",
        "default-src 'self'",
        "script-src 'none'",
    ],
)
async def test_csp_without_blocking_frame_ancestors_is_displayable(csp):
    verdict = await _probe_with(httpx.Response(200, headers={"Content-Security-Policy": csp}))
    assert verdict is ProbeVerdict.DISPLAYABLE


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 403, 404, 500, 503])
async def test_error_status_is_http_error(status):
    assert await _probe_with(httpx.Response(status)) is ProbeVerdict.HTTP_ERROR


@pytest.mark.asyncio
async def test_probe_sends_head_with_custom_user_agent():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    async with _client(handler) as client:
        await frame_probe.probe("https://example.com/page", client=client, timeout=1.0)

    assert len(seen) == 1
    assert seen[0].method == "HEAD"
    assert seen[0].headers["User-Agent"] == "ResearchSearchBot/1.0"


@pytest.mark.asyncio
async def test_headers_are_read_from_redirect_target():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/start":
            return httpx.Response(301, headers={"Location": "https://example.com/final"})
        return httpx.Response(200, headers={"X-Frame-Options": "DENY"})

    async with _client(handler) as client:
        verdict = await frame_probe.probe("https://example.com/start", client=client, timeout=1.0)

    assert verdict is ProbeVerdict.BLOCKED_BY_HEADER


@pytest.mark.asyncio
async def test_network_error_is_network_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        verdict = await frame_probe.probe("https://unreachable.example", client=client, timeout=1.0)

    assert verdict is ProbeVerdict.NETWORK_FAILURE


@pytest.mark.asyncio
async def test_invalid_url_is_network_failure():
    async with _client(lambda request: httpx.Response(200)) as client:
        verdict = await frame_probe.probe("not a url", client=client, timeout=1.0)

    assert verdict is ProbeVerdict.NETWORK_FAILURE


@pytest.mark.asyncio
async def test_slow_server_times_out_within_bound():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200)

    async with _client(handler) as client:
        started = time.monotonic()
        verdict = await frame_probe.probe("https://slow.example", client=client, timeout=0.1)
        elapsed = time.monotonic() - started

    assert verdict is ProbeVerdict.TIMED_OUT
    assert elapsed < 1.0


@pytest.mark.asyncio
async def test_httpx_timeout_is_timed_out():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    async with _client(handler) as client:
        verdict = await frame_probe.probe("https://slow.example", client=client, timeout=1.0)

    assert verdict is ProbeVerdict.TIMED_OUT


@pytest.mark.asyncio
async def test_frame_ancestors_in_second_csp_header_blocks():
    verdict = await _probe_with(
        httpx.Response(
            200,
            headers=[
                ("Content-Security-Policy", "default-src 'self'"),
                ("Content-Security-Policy", "frame-ancestors 'none'"),
            ],
        )
    )
    assert verdict is ProbeVerdict.BLOCKED_BY_HEADER


def test_comma_joined_csp_value_blocks():
    headers = httpx.Headers({"Content-Security-Policy": "default-src 'self', frame-ancestors 'self'"})
    assert frame_probe.blocking_header(headers) == "CSP frame-ancestors 'self'"


@pytest.mark.asyncio
async def test_repeated_x_frame_options_header_blocks():
    verdict = await _probe_with(
        httpx.Response(
            200,
            headers=[("X-Frame-Options", "SAMEORIGIN"), ("X-Frame-Options", "SAMEORIGIN")],
        )
    )
    assert verdict is ProbeVerdict.BLOCKED_BY_HEADER


def test_comma_joined_x_frame_options_blocks():
    headers = httpx.Headers({"X-Frame-Options": "sameorigin, DENY"})
    assert frame_probe.blocking_header(headers) == "X-Frame-Options: SAMEORIGIN"
