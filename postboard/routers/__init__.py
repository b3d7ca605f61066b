"""
FastAPI routers grouped by domain (auth, posts).

Each module exposes an APIRouter included by ``postboard.app.create_app``.
Handlers call exactly one repository operation per request.
"""
