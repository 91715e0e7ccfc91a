"""Central API router composition.

This module is responsible for mounting individual route modules on the main app
router and providing a single import point for `FastAPI.include_router(...)`.
"""

from fastapi import APIRouter

from .categories import router as categories_router
from .integrations import router as integrations_router
from .jobs import router as jobs_router
from .quick_links import router as quick_links_router
from .rss_feeds import router as rss_feeds_router
from .services import router as services_router
from .widgets import router as widgets_router

router = APIRouter(prefix="/api/v1", tags=["v1"])

router.include_router(services_router)
router.include_router(categories_router)
router.include_router(quick_links_router)
router.include_router(rss_feeds_router)
router.include_router(widgets_router)
router.include_router(integrations_router)
router.include_router(jobs_router)
