# main.py - Main entry point of the FastAPI application
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from routes import auth_routes
from routes import user_routes
from routes import report_routes
from routes import notification_routes
from routes import dashboard_routes
from services.errors import WorkflowError

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# FastAPI application with descriptive metadata
app = FastAPI(
    title=config.APP_NAME,
    description="Bantay Daluyan backend: residents report drainage problems, barangay officials review them, city engineers repair them, and everyone involved is notified along the way.",
    version="1.0.0",
)

# CORS so the web and mobile frontends can talk to the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Workflow errors become JSON responses with their own status code
@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "detail": exc.detail},
    )


# Register all routers with their route prefixes
app.include_router(auth_routes.router, prefix="/auth", tags=["auth"])
app.include_router(user_routes.router, prefix="/users", tags=["users"])
app.include_router(report_routes.router, prefix="/reports", tags=["reports"])
app.include_router(
    notification_routes.router, prefix="/notifications", tags=["notifications"]
)
app.include_router(dashboard_routes.router, prefix="/dashboard", tags=["dashboard"])


# Server health check endpoint
@app.get("/")
async def root():
    return {"message": "Bantay Daluyan backend running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
