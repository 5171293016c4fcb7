from pydantic import BaseModel


class Coordinates(BaseModel):
    latitude: float
    longitude: float


class Thumbnail(BaseModel):
    source: str
    width: int | None = None
    height: int | None = None


class Marker(BaseModel):
    """One nearby article, flattened from a geosearch page."""
    title: str
    url: str
    lat: float
    lng: float
    thumbnail: Thumbnail | None = None
