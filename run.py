#!/usr/bin/env python3
"""
Startup script: serves the widget API, or renders one widget run to stdout.

    python run.py --port 8080
    python run.py --render --param '{"apiKey": "...", "latitude": 42.36, "longitude": -71.06}'
    python run.py --mode list --save-map map.png
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from nearbymap.config.loader import ConfigLoader, load_config_for_environment
from nearbymap.core.exceptions import WidgetException
from nearbymap.core.logging import configure_logging
from nearbymap.core.storage import FileLogger
from nearbymap.services.parameter_service import ParameterService
from nearbymap.services.widget_service import WidgetService

logger = logging.getLogger("nearbymap.run")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Nearby Map Widget")
    parser.add_argument(
        "--env",
        choices=["development", "staging", "production", "testing"],
        default=None,
        help="Environment to run (default: from ENVIRONMENT env var or development)"
    )
    parser.add_argument("--host", default=None, help="Host to bind to (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to (overrides config)")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload (overrides config)")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode (overrides config)")
    parser.add_argument(
        "--list-envs",
        action="store_true",
        help="List available environment configurations"
    )
    parser.add_argument(
        "--create-sample",
        help="Create a sample .env file for the specified environment"
    )

    render = parser.add_argument_group("render", "Run the widget once and print the result as JSON")
    render.add_argument("--render", action="store_true", help="Render instead of serving")
    render.add_argument("--param", default=None, help="Widget parameter JSON")
    render.add_argument("--name", default=None, help="Script name used for storage files")
    render.add_argument("--lat", type=float, default=None, help="Latitude override")
    render.add_argument("--lon", type=float, default=None, help="Longitude override")
    render.add_argument("--mode", choices=["widget", "list"], default=None, help="View to render")
    render.add_argument("--save-map", default=None, help="Also write the static map image to this path")
    render.add_argument(
        "--save-params",
        action="store_true",
        help="Store the resolved parameters in the storage folder"
    )
    return parser


async def render_once(args, settings) -> int:
    parameter_service = ParameterService(settings)
    params = parameter_service.resolve_parameters(args.param, args.name)
    if params is None:
        print("No valid parameters!")
        return 1

    if args.lat is not None and args.lon is not None:
        params = params.model_copy(update={"latitude": args.lat, "longitude": args.lon})
    if args.debug:
        params = params.model_copy(update={"debug": True})
    if args.save_params:
        parameter_service.save_parameters(params, args.name)

    service = WidgetService(settings)
    try:
        # The map fetch belongs to the same performance row as the run
        view = await service.run(params, args.mode, args.name, record=not args.save_map)
        print(view.model_dump_json(indent=2))

        if args.save_map:
            image = await service.load_map_image(view.map_url) if view.map_url else None
            if image is None:
                print(f"✗ Could not load map image for {args.save_map}")
                return 1
            Path(args.save_map).write_bytes(image.content)
            print(f"✓ Map image written to {args.save_map}")
    except WidgetException as e:
        logger.error(f"Widget run failed: {e.message}", extra={"details": e.details})
        print(f"✗ {e.message}")
        return 1
    finally:
        if args.save_map:
            service.save_performance(args.name)
    return 0


def render(args, settings) -> int:
    file_logger = None
    if settings.write_log_file or args.debug:
        file_logger = FileLogger(settings.storage_dir, args.name or settings.script_name)
        logging.getLogger().addHandler(file_logger)

    try:
        return asyncio.run(render_once(args, settings))
    finally:
        if file_logger is not None:
            file_logger.write_logs_to_file()
            logging.getLogger().removeHandler(file_logger)


def serve(settings) -> None:
    print(f"🚀 Starting {settings.app_name} v{settings.app_version}")
    print(f"   Environment: {settings.environment.value}")
    print(f"   Host: {settings.host}")
    print(f"   Port: {settings.port}")
    print(f"   Debug: {settings.debug}")
    print(f"   Log Level: {settings.log_level.value}")

    # The server process imports nearbymap.main, which loads its own settings
    os.environ["ENVIRONMENT"] = settings.environment.value
    os.environ["DEBUG"] = "true" if settings.debug else "false"

    import uvicorn

    uvicorn.run(
        "nearbymap.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.value.lower(),
        access_log=True,
    )


def main(argv=None) -> int:
    """Main startup function with environment configuration"""
    args = build_parser().parse_args(argv)

    if args.list_envs:
        print("Available environment configurations:")
        for env in ConfigLoader.get_available_environments():
            print(f"  - {env}")
        return 0

    if args.create_sample:
        try:
            sample_file = ConfigLoader.create_sample_env_file(args.create_sample)
        except (OSError, ValueError) as e:
            print(f"✗ Failed to create sample configuration: {e}")
            return 1
        print(f"✓ Sample configuration created: {sample_file}")
        return 0

    try:
        settings = load_config_for_environment(args.env)
    except ValueError as e:
        print(f"✗ Failed to load configuration: {e}")
        return 1

    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    if args.reload:
        settings.reload = True
    if args.debug:
        settings.debug = True

    configure_logging(settings.log_level.value, settings.log_file, settings.log_format)

    render_options = (
        args.render, args.mode, args.param, args.name, args.save_map, args.save_params,
        args.lat is not None, args.lon is not None,
    )
    if any(render_options):
        return render(args, settings)

    serve(settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
