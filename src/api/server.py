from fastapi import FastAPI
from src.api.routes import settings as settings_routes
from src.api.routes import system as system_routes

app = FastAPI(title="TikTok Notifier API", version="0.1.0")

app.include_router(settings_routes.router)
app.include_router(system_routes.router)

# Controller injection proxy

def set_controller(controller, settings=None):
    system_routes.set_controller(controller)
    if settings is not None:
        settings_routes.set_settings(settings)
