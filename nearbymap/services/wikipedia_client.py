"""
Wikipedia geosearch client.

One request to the MediaWiki action API returns the articles around a
coordinate together with their coordinates and page images, e.g.::

    https://en.wikipedia.org/w/api.php?action=query&format=json
        &prop=coordinates|pageimages&generator=geosearch
        &ggscoord=41.68|-70.19&ggsradius=10000

Response excerpt::

    {"batchcomplete": "", "query": {"pages": {"38743": {
        "pageid": 38743, "ns": 0, "title": "Cape Cod", "index": -1,
        "coordinates": [{"lat": 41.68, "lon": -70.2, "primary": "", "globe": "earth"}],
        "thumbnail": {"source": "https://upload.wikimedia.org/.../50px-Ccnatsea.jpg",
                      "width": 50, "height": 34},
        "pageimage": "Ccnatsea.jpg"}}}}

which is flattened into ``Marker(title="Cape Cod", url="https://en.wikipedia.org/?curid=38743",
lat=41.68, lng=-70.2, thumbnail=Thumbnail(...))``.
"""

import logging
import math
from typing import Any, Dict, List, Optional

import httpx

from nearbymap.config.settings import WikipediaSettings, get_settings
from nearbymap.core.exceptions import GeosearchResponseError
from nearbymap.schemas.marker import Marker, Thumbnail

logger = logging.getLogger(__name__)

WIKIPEDIA_PAGE_URL = "https://en.wikipedia.org/"


def get_wiki_url_by_page_id(page_id: int, page_url: str = WIKIPEDIA_PAGE_URL) -> str:
    return f"{page_url}?curid={page_id}"


def get_geosearch_params(lat: float, lng: float, radius_m: int = 10000, limit: int = 10) -> Dict[str, str]:
    return {
        "action": "query",
        "format": "json",
        "prop": "coordinates|pageimages",
        "generator": "geosearch",
        "ggscoord": f"{lat}|{lng}",
        "ggsradius": str(radius_m),
        "ggslimit": str(limit),
    }


def _page_sort_key(page: Dict[str, Any]):
    index = page.get("index")
    return (index if isinstance(index, (int, float)) else math.inf, page.get("pageid", 0))


def articles_from_geosearch(payload: Any, page_url: str = WIKIPEDIA_PAGE_URL) -> List[Marker]:
    """
    Flatten a geosearch response into markers, nearest first.

    Raises:
        GeosearchResponseError: the payload has no ``query.pages`` section
    """
    query = payload.get("query") if isinstance(payload, dict) else None
    pages = query.get("pages") if isinstance(query, dict) else None
    if not pages:
        raise GeosearchResponseError()

    if isinstance(pages, dict):
        pages = list(pages.values())

    markers = []
    for page in sorted(pages, key=_page_sort_key):
        coordinates = page.get("coordinates") or []
        if not coordinates:
            logger.debug(f"Skipping '{page.get('title')}': no coordinates")
            continue

        thumbnail = page.get("thumbnail")
        markers.append(Marker(
            title=page["title"],
            url=get_wiki_url_by_page_id(page["pageid"], page_url),
            lat=coordinates[0]["lat"],
            lng=coordinates[0]["lon"],
            thumbnail=Thumbnail(**thumbnail) if thumbnail else None,
        ))
    return markers


class WikipediaClient:
    """Looks up Wikipedia articles near a coordinate."""

    def __init__(
        self,
        settings: Optional[WikipediaSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings().wikipedia
        self.api_url = self.settings.api_url
        self.page_url = self.settings.page_url
        self.timeout = self.settings.timeout_seconds
        self._transport = transport

    def _get_headers(self) -> dict:
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": "application/json",
        }

    async def get_nearby_articles(self, lat: float, lng: float) -> Optional[List[Marker]]:
        """
        Fetch articles near ``lat``/``lng``.

        Returns:
            Markers nearest first, or None when the request or the payload failed
        """
        params = get_geosearch_params(
            lat, lng, self.settings.search_radius_m, self.settings.result_limit
        )
        try:
            async with httpx.AsyncClient(
                headers=self._get_headers(),
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(self.api_url, params=params)
                response.raise_for_status()
                payload = response.json()

            logger.debug(f"Wiki JSON: {payload}")
            articles = articles_from_geosearch(payload, self.page_url)
        except (httpx.HTTPError, ValueError, KeyError, GeosearchResponseError) as e:
            logger.error(f"Could not load nearby articles for {lat},{lng}: {e}")
            return None

        logger.info(f"Found {len(articles)} articles near {lat},{lng}")
        return articles
