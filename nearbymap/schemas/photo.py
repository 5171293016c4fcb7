from pydantic import BaseModel


class FlickrPhoto(BaseModel):
    id: str
    title: str
    owner: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    image_url: str
    page_url: str

    @property
    def is_geotagged(self) -> bool:
        return self.latitude is not None and self.longitude is not None
