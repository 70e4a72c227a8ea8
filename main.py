from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from lms.core.config import settings
from lms.core.logging import configure_logging
from lms.endpoints import assessment, assignment, assignment_submission, course, enrollment, grade
from lms.middleware.exceptions import register_exception_handlers
from lms.middleware.logging import RequestLoggingMiddleware

configure_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.include_router(course.router, prefix="/courses", tags=["Courses"])
app.include_router(enrollment.router, prefix="/enrollments", tags=["Enrollments"])
app.include_router(assessment.router, prefix="/assessments", tags=["Assessments"])
app.include_router(assignment.router, prefix="/assignments", tags=["Assignments"])
app.include_router(assignment_submission.router, prefix="/submissions", tags=["Assignment Submissions"])
app.include_router(grade.router, prefix="/grades", tags=["Grades"])

@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "ok", "service": settings.PROJECT_NAME, "version": settings.VERSION}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
