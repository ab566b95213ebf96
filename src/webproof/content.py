"""Content sources: the capability that produces the attested text.

A source exposes ``extract(session_context)`` returning either a str or an
awaitable str. The generator passes its session binding source as the
context. Any exception raised here is wrapped in ContentExtractionError by the
generator.
"""
from __future__ import annotations

from typing import Any, Awaitable, Optional, Protocol, Union, runtime_checkable

import httpx

from .config import ETH_PRICE_URL, FETCH_TIMEOUT_SEC, OPENWEATHER_API_KEY, WEATHER_URL


@runtime_checkable
class ContentSource(Protocol):
    def extract(self, session_context: Any) -> Union[str, Awaitable[str]]: ...


class StaticContentSource:
    def __init__(self, text: str):
        self.text = text

    def extract(self, session_context: Any) -> str:
        return self.text


def lookup_path(doc: Any, path: str) -> Any:
    """Walk a dotted JSON path; numeric segments index into lists.

    ``lookup_path({"weather": [{"main": "Rain"}]}, "weather.0.main") == "Rain"``
    """
    cur = doc
    for seg in path.split("."):
        if isinstance(cur, list):
            cur = cur[int(seg)]
        elif isinstance(cur, dict):
            cur = cur[seg]
        else:
            raise KeyError(f"cannot descend into {type(cur).__name__} at {seg!r}")
    return cur


class JsonFieldSource:
    """Fetch a JSON document over HTTPS and format one field of it."""

    def __init__(
        self,
        url: str,
        path: str,
        template: str = "{value}",
        *,
        params: Optional[dict] = None,
        timeout: float = FETCH_TIMEOUT_SEC,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.path = path
        self.template = template
        self.params = params
        self.timeout = timeout
        self.transport = transport

    async def fetch_json(self) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            resp = await client.get(self.url, params=self.params)
            resp.raise_for_status()
            return resp.json()

    def render(self, doc: Any) -> str:
        return self.template.format(value=lookup_path(doc, self.path))

    async def extract(self, session_context: Any) -> str:
        return self.render(await self.fetch_json())


class EthereumPriceSource(JsonFieldSource):
    def __init__(self, url: str = ETH_PRICE_URL, **kw):
        super().__init__(url, "ethereum.usd", **kw)

    def render(self, doc: Any) -> str:
        price = float(lookup_path(doc, self.path))
        return f"The current price of Ethereum is: ${price:.2f}"


class WeatherSource(JsonFieldSource):
    def __init__(self, city: str = "London", api_key: str = OPENWEATHER_API_KEY, url: str = WEATHER_URL, **kw):
        super().__init__(url, "main.temp", params={"q": city, "appid": api_key, "units": "metric"}, **kw)
        self.city = city

    def render(self, doc: Any) -> str:
        if isinstance(doc, dict) and doc.get("message"):
            raise ValueError(f"API error: {doc['message']}")
        temperature = float(lookup_path(doc, "main.temp"))
        description = lookup_path(doc, "weather.0.description")
        return f"Weather in {self.city}: {temperature:.1f}°C, {description}"


__all__ = [
    "ContentSource",
    "StaticContentSource",
    "JsonFieldSource",
    "EthereumPriceSource",
    "WeatherSource",
    "lookup_path",
]
