from __future__ import annotations

from fastapi import FastAPI

from payping.application.dtos.common_dto import HealthResponse, RootResponse
from payping.core.logging import configure_logging
from payping.infrastructure.api.middlewares import add_default_middlewares, add_exception_handlers
from payping.infrastructure.api.routes.activation_routes import router as activation_router
from payping.infrastructure.api.routes.admin_routes import router as admin_router
from payping.infrastructure.api.routes.auth_routes import router as auth_router
from payping.infrastructure.api.routes.client_routes import router as client_router
from payping.infrastructure.api.routes.dashboard_routes import router as dashboard_router
from payping.infrastructure.api.routes.plan_routes import router as plan_router
from payping.infrastructure.api.routes.reminder_routes import router as reminder_router


def create_app() -> FastAPI:
    logger = configure_logging()
    app = FastAPI(
        title="PayPing Backend",
        version="0.1.0",
        description="""
        ## PayPing Backend API

        Follow-up and payment reminder tracker for freelancers and small
        businesses, with manual payment activation.

        ### Features
        - **Authentication**: Token-based authentication with Supabase
        - **Activation**: Users submit payment proof; administrators approve or reject it
        - **Clients**: Keep the people you need to follow up with
        - **Reminders**: Schedule follow-ups and payment reminders, mark them done
        - **Dashboard**: What is due today, this week, and overdue

        ### Authentication
        All endpoints (except root, health and plans) require authentication via Bearer token
        in the Authorization header:
        ```
        Authorization: Bearer your-jwt-token
        ```
        Client, reminder and dashboard endpoints additionally require an activated account.

        ### Error Responses
        - **400 Bad Request**: Invalid input
        - **401 Unauthorized**: Missing or invalid authentication token
        - **403 Forbidden**: Account not activated, administrator role required, or entity owned by another user
        - **404 Not Found**: Requested resource does not exist
        - **409 Conflict**: Invalid state transition, e.g. resolving a request twice
        - **422 Unprocessable Entity**: Validation error in request body
        - **500 Internal Server Error**: Unexpected server error
        """,
        contact={
            "name": "PayPing Team",
            "email": "support@payping.app",
        },
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )
    add_default_middlewares(app)
    add_exception_handlers(app)

    @app.get(
        "/",
        response_model=RootResponse,
        summary="API Root",
        description="Get basic information about the PayPing API",
        response_description="API information including status and version",
    )
    def root():
        """Get API root information."""
        return {"status": "ok", "service": "payping-backend", "version": app.version}

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Health Check",
        description="Check if the API service is running and healthy",
        response_description="Health status of the API service",
    )
    def health():
        """Check API health status."""
        return {"status": "healthy"}

    app.include_router(auth_router)
    app.include_router(plan_router)
    app.include_router(activation_router)
    app.include_router(admin_router)
    app.include_router(client_router)
    app.include_router(reminder_router)
    app.include_router(dashboard_router)
    logger.info("PayPing backend ready")
    return app


app = create_app()
