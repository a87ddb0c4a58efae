"""
FastAPI routers grouped by domain (auth, categories, transactions).

Each module exposes an APIRouter that is included in the main application
(app.py). Handlers only parse the request, call a service and wrap the result
in the JSON envelope.
"""
