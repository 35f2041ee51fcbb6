# orgpanel/routes/__init__.py
from .auth_routes import router as auth_router
from .company_routes import router as company_router
from .department_routes import router as department_router
from .user_routes import router as user_router

def include_routes(app):
    """Include all routes in the FastAPI app."""
    app.include_router(auth_router)
    app.include_router(company_router)
    app.include_router(department_router)
    app.include_router(user_router)
