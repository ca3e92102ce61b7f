"""API router package.

This package contains the HTTP route modules for the stats API.

Most code should import the composed router via:

    from services.cfb_api.app.routes import router

The actual composition lives in `services/cfb_api/app/routes/api_router.py`.
"""

from .api_router import router
