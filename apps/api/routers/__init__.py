"""Routers package."""

from . import (
    health,
    auth,
    course,
    blogs,
    portfolios,
    analytics,
)
