"""
FastAPI routers grouped by domain (auth, contact, account).

Each module exposes an APIRouter included by the application factory.
"""
