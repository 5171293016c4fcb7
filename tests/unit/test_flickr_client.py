import random

import httpx
import pytest

from nearbymap.config.settings import FlickrSettings
from nearbymap.core.exceptions import MissingApiKeyError, PhotosetResponseError
from nearbymap.schemas.marker import Coordinates
from nearbymap.schemas.photo import FlickrPhoto
from nearbymap.services.flickr_client import FlickrClient, photos_from_photoset, pick_photo

SPOT_POND = Coordinates(latitude=42.45, longitude=-71.09)


def _photo(photo_id, lat=None, lng=None):
    return FlickrPhoto(
        id=photo_id,
        title=photo_id,
        latitude=lat,
        longitude=lng,
        image_url=f"https://live.staticflickr.com/1/{photo_id}_b.jpg",
        page_url=f"https://www.flickr.com/photo.gne?id={photo_id}",
    )


class TestPhotosFromPhotoset:

    def test_reshapes_photos(self, photoset_payload):
        photos = photos_from_photoset(photoset_payload, "777")

        assert [p.id for p in photos] == ["1", "2"]
        first = photos[0]
        assert first.title == "Spot Pond at dusk"
        assert first.owner == "12345@N00"
        assert first.image_url == "https://live.staticflickr.com/65535/1_abc_b.jpg"
        assert first.page_url == "https://www.flickr.com/photos/12345@N00/1/in/album-777/"
        assert first.is_geotagged

    def test_zero_coordinates_mean_not_geotagged(self):
        payload = {"stat": "ok", "photoset": {"id": "9", "photo": [
            {"id": "5", "title": "Indoors", "latitude": 0, "longitude": 0,
             "server": "65535", "secret": "s3cr3t"},
        ]}}
        photo = photos_from_photoset(payload)[0]

        assert not photo.is_geotagged
        assert photo.image_url == "https://live.staticflickr.com/65535/5_s3cr3t_b.jpg"
        assert photo.page_url == "https://www.flickr.com/photo.gne?id=5"

    def test_photos_without_any_url_are_skipped(self):
        payload = {"stat": "ok", "photoset": {"photo": [{"id": "7", "title": "Ghost"}]}}
        assert photos_from_photoset(payload) == []

    def test_failed_lookup_raises(self):
        payload = {"stat": "fail", "code": 1, "message": "Photoset not found"}
        with pytest.raises(PhotosetResponseError, match="Photoset not found"):
            photos_from_photoset(payload)


class TestPickPhoto:

    def test_empty_list(self):
        assert pick_photo([], SPOT_POND) is None

    def test_nearest_photo_wins_with_pool_of_one(self):
        photos = [_photo("paris", 48.85, 2.35), _photo("pond", 42.451, -71.091), _photo("boston", 42.36, -71.06)]
        assert pick_photo(photos, SPOT_POND, pool_size=1).id == "pond"

    def test_pool_limits_choice_to_nearest(self):
        photos = [_photo("paris", 48.85, 2.35), _photo("pond", 42.451, -71.091), _photo("boston", 42.36, -71.06)]
        rng = random.Random(0)
        picks = {pick_photo(photos, SPOT_POND, pool_size=2, rng=rng).id for _ in range(50)}
        assert picks <= {"pond", "boston"}

    def test_without_location_any_photo_may_be_picked(self):
        photos = [_photo("a", 1.0, 1.0), _photo("b")]
        rng = random.Random(1)
        picks = {pick_photo(photos, None, rng=rng).id for _ in range(50)}
        assert picks == {"a", "b"}

    def test_nothing_geotagged_falls_back_to_all(self):
        photos = [_photo("a"), _photo("b")]
        assert pick_photo(photos, SPOT_POND).id in {"a", "b"}


@pytest.mark.asyncio
async def test_client_requests_photoset(photoset_payload):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=photoset_payload)

    client = FlickrClient(
        FlickrSettings(api_key="flickr-key", photoset_id="777", user_id="12345@N00"),
        transport=httpx.MockTransport(handler),
    )
    photos = await client.get_photoset_photos()

    assert len(photos) == 2
    params = requests[0].url.params
    assert params["method"] == "flickr.photosets.getPhotos"
    assert params["api_key"] == "flickr-key"
    assert params["photoset_id"] == "777"
    assert params["user_id"] == "12345@N00"
    assert params["nojsoncallback"] == "1"


@pytest.mark.asyncio
async def test_random_photo_near_location(photoset_payload):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=photoset_payload))
    client = FlickrClient(
        FlickrSettings(api_key="flickr-key", photoset_id="777", nearest_pool_size=1),
        transport=transport,
    )

    photo = await client.get_random_photo(SPOT_POND)

    assert photo.title == "Spot Pond at dusk"


@pytest.mark.asyncio
async def test_failed_photoset_gives_no_photo():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"stat": "fail", "message": "Invalid API Key"})
    )
    client = FlickrClient(FlickrSettings(api_key="bad", photoset_id="777"), transport=transport)

    assert await client.get_photoset_photos() == []
    assert await client.get_random_photo(SPOT_POND) is None


@pytest.mark.asyncio
async def test_missing_api_key_raises():
    client = FlickrClient(FlickrSettings(api_key=None, photoset_id="777"))
    with pytest.raises(MissingApiKeyError):
        await client.get_photoset_photos()
