"""
FastAPI routers grouped by collection (organizations, teams, people, etc.).

Each module exposes an APIRouter included by the application factory in
app.py. Services are looked up on ``request.app.state`` through deps.py.
"""
