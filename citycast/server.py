import asyncio
import contextlib
from importlib import import_module
from pathlib import Path

from fastapi import FastAPI

from .cities.registry import CityRegistry
from .integrations.openweather.client import OpenWeatherClient
from .weather.tasks import WeatherRefresher

app = FastAPI(title="citycast")


def load_apps(path: Path) -> None:
    for api_module in path.glob("*/api.py"):

        # Construct the name of the module
        relative_path = api_module.relative_to(Path(__file__).parent)
        module_path = ".".join(p.name for p in reversed(relative_path.parents))
        module_name = f"{module_path}.{api_module.stem}"

        # Register the module
        module = import_module(module_name, package="citycast")
        if router := getattr(module, "router", None):
            app.include_router(router)


load_apps(Path(__file__).parent)


@app.on_event("startup")
async def startup() -> None:
    registry = CityRegistry()
    refresher = WeatherRefresher(registry=registry, client=OpenWeatherClient())

    app.state.registry = registry
    app.state.refresher = refresher
    app.state.refresh_loop = asyncio.create_task(refresher.run())


@app.on_event("shutdown")
async def shutdown() -> None:
    app.state.refresh_loop.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await app.state.refresh_loop
    await app.state.refresher.client.close()


@app.get("/health")
async def get_health() -> dict:
    return {"status": "pass"}
