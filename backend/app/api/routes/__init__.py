# API Routes Module
from app.api.routes import (
    billing,
    ideas,
    pipeline,
    reviews,
    scripts,
    settings,
    webhooks,
)

__all__ = [
    "billing",
    "ideas",
    "pipeline",
    "reviews",
    "scripts",
    "settings",
    "webhooks",
]
