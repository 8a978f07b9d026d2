import logging
import logging.config

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from lms.config import CORS_ORIGINS, LOGGING
from lms.database import db, create_indexes, utc_now
from lms.errors import http_exception_handler, unhandled_exception_handler
from lms.auth.auth_router import router as auth_router
from lms.hierarchy.hierarchy_router import (
    verticals_router,
    batches_router,
    modules_router,
    weeks_router,
    lectures_router
)
from lms.assignments.assignment_router import router as assignments_router
from lms.enrollments.enrollment_router import router as enrollments_router
from lms.submissions.submission_router import router as submissions_router

logging.config.dictConfig(LOGGING)
logger = logging.getLogger(__name__)

app = FastAPI(title="LMS Backend")

@app.on_event("startup")
async def startup_event():
    await create_indexes(db)
    logger.info("LMS backend started")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# ==================== ROUTER REGISTRATION ====================

app.include_router(auth_router)
app.include_router(verticals_router)
app.include_router(batches_router)
app.include_router(modules_router)
app.include_router(weeks_router)
app.include_router(lectures_router)
app.include_router(assignments_router)
app.include_router(enrollments_router)
app.include_router(submissions_router)

# ============================================================

@app.get("/health")
async def health():
    return {"status": "ok", "timestamp": utc_now().isoformat()}
