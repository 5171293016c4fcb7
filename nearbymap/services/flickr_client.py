"""
Flickr photoset client for the photo variant of the widget.
"""

import logging
import random
from typing import Any, Dict, List, Optional

import httpx

from nearbymap.config.settings import FlickrSettings, get_settings
from nearbymap.core.exceptions import MissingApiKeyError, PhotosetResponseError
from nearbymap.schemas.marker import Coordinates
from nearbymap.schemas.photo import FlickrPhoto
from nearbymap.services.location_service import haversine_m

logger = logging.getLogger(__name__)

PHOTO_EXTRAS = "geo,url_l,url_m,url_o"
STATIC_PHOTO_URL = "https://live.staticflickr.com/{server}/{id}_{secret}_b.jpg"


def _coordinate(value: Any) -> Optional[float]:
    # Flickr reports 0 for photos without geo data
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number or None


def _image_url(photo: Dict[str, Any]) -> Optional[str]:
    for key in ("url_l", "url_m", "url_o"):
        if photo.get(key):
            return photo[key]
    if photo.get("server") and photo.get("secret"):
        return STATIC_PHOTO_URL.format(**photo)
    return None


def _page_url(photo_id: str, owner: Optional[str], photoset_id: Optional[str]) -> str:
    if not owner:
        return f"https://www.flickr.com/photo.gne?id={photo_id}"
    url = f"https://www.flickr.com/photos/{owner}/{photo_id}/"
    if photoset_id:
        url += f"in/album-{photoset_id}/"
    return url


def photos_from_photoset(payload: Any, photoset_id: Optional[str] = None) -> List[FlickrPhoto]:
    """
    Reshape a ``flickr.photosets.getPhotos`` response.

    Raises:
        PhotosetResponseError: Flickr reported a failure or the payload is malformed
    """
    if not isinstance(payload, dict) or payload.get("stat") != "ok":
        message = payload.get("message") if isinstance(payload, dict) else None
        raise PhotosetResponseError(
            message=f"Flickr photoset lookup failed: {message or 'unexpected response'}"
        )

    photoset = payload.get("photoset") or {}
    owner = photoset.get("owner")
    photos = []
    for photo in photoset.get("photo", []):
        image_url = _image_url(photo)
        if not image_url:
            continue
        photos.append(FlickrPhoto(
            id=str(photo["id"]),
            title=photo.get("title") or "",
            owner=owner,
            latitude=_coordinate(photo.get("latitude")),
            longitude=_coordinate(photo.get("longitude")),
            image_url=image_url,
            page_url=_page_url(str(photo["id"]), owner, photoset_id or photoset.get("id")),
        ))
    return photos


def pick_photo(
    photos: List[FlickrPhoto],
    location: Optional[Coordinates] = None,
    pool_size: int = 1,
    rng: Optional[random.Random] = None,
) -> Optional[FlickrPhoto]:
    """
    Pick one photo at random among the ``pool_size`` nearest geotagged photos,
    or among all photos when there is no location or nothing is geotagged.
    """
    if not photos:
        return None
    rng = rng or random.Random()

    geotagged = [p for p in photos if p.is_geotagged]
    if location is None or not geotagged:
        return rng.choice(photos)

    nearest = sorted(
        geotagged,
        key=lambda p: haversine_m(location.latitude, location.longitude, p.latitude, p.longitude),
    )
    return rng.choice(nearest[:max(1, pool_size)])


class FlickrClient:
    def __init__(
        self,
        settings: Optional[FlickrSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings or get_settings().flickr
        self._transport = transport
        self._rng = rng or random.Random()

    def _get_params(self) -> Dict[str, str]:
        if not self.settings.api_key:
            raise MissingApiKeyError("flickr")
        params = {
            "method": "flickr.photosets.getPhotos",
            "api_key": self.settings.api_key,
            "photoset_id": self.settings.photoset_id or "",
            "extras": PHOTO_EXTRAS,
            "media": "photos",
            "format": "json",
            "nojsoncallback": "1",
        }
        if self.settings.user_id:
            params["user_id"] = self.settings.user_id
        return params

    async def get_photoset_photos(self) -> List[FlickrPhoto]:
        """All photos of the configured photoset; empty on any failure."""
        params = self._get_params()
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(self.settings.api_url, params=params)
                response.raise_for_status()
                payload = response.json()
            photos = photos_from_photoset(payload, self.settings.photoset_id)
        except (httpx.HTTPError, ValueError, KeyError, PhotosetResponseError) as e:
            logger.error(f"Could not load photoset {self.settings.photoset_id}: {e}")
            return []

        logger.info(f"Loaded {len(photos)} photos from photoset {self.settings.photoset_id}")
        return photos

    async def get_random_photo(self, location: Optional[Coordinates] = None) -> Optional[FlickrPhoto]:
        photos = await self.get_photoset_photos()
        return pick_photo(photos, location, self.settings.nearest_pool_size, self._rng)
