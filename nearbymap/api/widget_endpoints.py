"""Widget endpoints: home-screen view, detail list, map image and photo variant."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from nearbymap.config.settings import get_settings
from nearbymap.core.exceptions import MissingParametersError
from nearbymap.schemas.base import Envelope
from nearbymap.schemas.parameters import ImageSource, WidgetParameters, WidgetSize
from nearbymap.schemas.widget import ListView, WidgetView
from nearbymap.services.parameter_service import ParameterService
from nearbymap.services.widget_service import WidgetService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/widget", tags=["widget"])


def get_widget_service() -> WidgetService:
    """A fresh service per request so performance timings belong to one run."""
    return WidgetService(get_settings())


def get_parameter_service() -> ParameterService:
    return ParameterService(get_settings())


def resolve_request_parameters(
    param: Optional[str] = Query(None, description="Widget parameter JSON"),
    lat: Optional[float] = Query(None, ge=-90.0, le=90.0),
    lon: Optional[float] = Query(None, ge=-180.0, le=180.0),
    size: Optional[WidgetSize] = Query(None),
    parameter_service: ParameterService = Depends(get_parameter_service),
) -> WidgetParameters:
    params = parameter_service.resolve_parameters(param)
    if params is None:
        raise MissingParametersError()

    overrides = {}
    if lat is not None and lon is not None:
        overrides.update(latitude=lat, longitude=lon)
    if size is not None:
        overrides["widget_size"] = size
    return params.model_copy(update=overrides) if overrides else params


@router.get("", response_model=Envelope[WidgetView])
async def get_widget(
    params: WidgetParameters = Depends(resolve_request_parameters),
    service: WidgetService = Depends(get_widget_service),
):
    view = await service.run(params, mode="widget")
    return Envelope[WidgetView](status="ok", data=view)


@router.get("/list", response_model=Envelope[ListView])
async def get_widget_list(
    params: WidgetParameters = Depends(resolve_request_parameters),
    service: WidgetService = Depends(get_widget_service),
):
    view = await service.run(params, mode="list")
    return Envelope[ListView](status="ok", data=view)


@router.get("/photo", response_model=Envelope[WidgetView])
async def get_photo_widget(
    params: WidgetParameters = Depends(resolve_request_parameters),
    service: WidgetService = Depends(get_widget_service),
):
    params = params.model_copy(update={"source": ImageSource.FLICKR})
    view = await service.run(params)
    return Envelope[WidgetView](status="ok", data=view)


@router.get("/map")
async def get_widget_map(
    params: WidgetParameters = Depends(resolve_request_parameters),
    service: WidgetService = Depends(get_widget_service),
):
    try:
        image = await service.get_map_image(params)
    finally:
        service.save_performance()

    if image is None:
        raise HTTPException(status_code=502, detail="Could not load static map image")
    return Response(content=image.content, media_type=image.content_type)
