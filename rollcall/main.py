from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rollcall.api.v1.attendance.router import router as attendance_router
from rollcall.api.v1.auth.router import router as auth_router
from rollcall.api.v1.dashboard.router import router as dashboard_router
from rollcall.api.v1.enrollments.router import router as enrollments_router
from rollcall.api.v1.leaves.router import router as leaves_router
from rollcall.api.v1.subjects.router import router as subjects_router
from rollcall.api.v1.users.student_router import router as students_router
from rollcall.api.v1.users.teacher_router import router as teachers_router
from rollcall.core.config import settings
from rollcall.core.logging import configure_logging


def create_app() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(title="Rollcall")

    origins = settings.cors_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentials with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(auth_router)
    app.include_router(teachers_router)
    app.include_router(students_router)
    app.include_router(subjects_router)
    app.include_router(enrollments_router)
    app.include_router(attendance_router)
    app.include_router(dashboard_router)
    app.include_router(leaves_router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
