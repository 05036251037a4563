"""Pruebas de los clientes de perfiles, estadísticas y noticias."""

import httpx
import pytest

from app.services.external import CovidApi, ExternalApiError, NewsApi, ProfileApi


def _transport(handler):
    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_profile_api_requests_profile_fields(settings):
    seen = {}

    def handler(request):
        seen["url"] = request.url
        return httpx.Response(200, json={"first_name": "Ana", "last_name": "Pérez", "timezone": -5})

    api = ProfileApi(transport=_transport(handler))
    profile = await api.get_user_profile("123")
    await api.close()

    assert profile.first_name == "Ana"
    assert seen["url"].path.endswith("/123")
    assert seen["url"].params["fields"] == "first_name,last_name,profile_pic,locale,timezone,gender"
    assert seen["url"].params["access_token"] == settings.PAGE_ACCESS_TOKEN


@pytest.mark.asyncio
async def test_profile_api_error_status_raises():
    api = ProfileApi(transport=_transport(lambda request: httpx.Response(500, text="down")))
    with pytest.raises(ExternalApiError):
        await api.get_user_profile("123")


@pytest.mark.asyncio
async def test_covid_region_summary():
    body = {"data": {"vietnam": {"cases": 10, "recovered": 7, "deaths": 1}, "global": {"cases": 99}}}
    api = CovidApi(transport=_transport(lambda request: httpx.Response(200, json=body)))

    vietnam = await api.get_region_summary("vietnam")
    world = await api.get_region_summary("global")

    assert (vietnam.cases, vietnam.recovered, vietnam.deaths) == (10, 7, 1)
    assert world.cases == 99


@pytest.mark.asyncio
async def test_covid_malformed_data_raises():
    api = CovidApi(transport=_transport(lambda request: httpx.Response(200, json={"data": {}})))
    with pytest.raises(ExternalApiError):
        await api.get_region_summary("vietnam")


@pytest.mark.asyncio
async def test_covid_countries_keep_api_order():
    body = {"Countries": [
        {"Country": "A", "CountryCode": "AA", "TotalConfirmed": 1, "TotalRecovered": 0, "TotalDeaths": 0},
        {"Country": "B", "CountryCode": "BB", "TotalConfirmed": 5, "TotalRecovered": 2, "TotalDeaths": 1},
    ]}
    api = CovidApi(transport=_transport(lambda request: httpx.Response(200, json=body)))

    countries = await api.get_countries()

    assert [c.country for c in countries] == ["A", "B"]
    assert countries[1].total_recovered == 2


@pytest.mark.asyncio
async def test_timeout_becomes_external_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    api = CovidApi(transport=_transport(handler))
    with pytest.raises(ExternalApiError):
        await api.get_countries()


@pytest.mark.asyncio
async def test_non_json_body_becomes_external_error():
    api = CovidApi(transport=_transport(lambda request: httpx.Response(200, text="<html>")))
    with pytest.raises(ExternalApiError):
        await api.get_countries()


@pytest.mark.asyncio
async def test_news_headlines_parsed():
    body = {"data": {"output": {
        "titles": ["Uno"], "descriptions": ["d1"], "images": ["https://img/1"], "links": ["https://n/1"]
    }}}
    api = NewsApi(transport=_transport(lambda request: httpx.Response(200, json=body)))

    digest = await api.get_headlines()

    assert digest.titles == ["Uno"]
    assert digest.links == ["https://n/1"]


@pytest.mark.asyncio
async def test_news_without_configured_feed_raises():
    api = NewsApi(transport=_transport(lambda request: httpx.Response(200, json={})))
    api.news_url = ""
    with pytest.raises(ExternalApiError):
        await api.get_headlines()
