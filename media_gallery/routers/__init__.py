from . import (
    delete_routers,
    gallery_routers,
    health_routers,
    metadata_routers,
    upload_routers,
)

__all__ = [
    "delete_routers",
    "gallery_routers",
    "health_routers",
    "metadata_routers",
    "upload_routers",
]
