from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from tripboard.routers import schedule
from tripboard.config import settings, cloud_config

# Initialize FastAPI app
app = FastAPI(
    title="Trip Board API",
    version="0.01",
    description="Schedule state for the trip-planning web client: drag reordering, day exchange and day notes"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins if not cloud_config.IS_CLOUD_RUN else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(schedule.router, prefix="/api/v1")

@app.get("/health")
def health_check():
    """Health check endpoint for Cloud Run and monitoring"""
    return {
        "status": "ok",
        "message": "Trip Board API is running",
        "environment": "cloud-run" if cloud_config.IS_CLOUD_RUN else "local",
        "remote": settings.api_base_url
    }

@app.get("/")
def root():
    """Root endpoint with API information"""
    return {
        "name": "Trip Board API",
        "version": "0.01",
        "docs_url": "/docs",
        "health_url": "/health"
    }

# For Cloud Run, the port is set via environment variable
if __name__ == "__main__":
    import uvicorn
    port = cloud_config.PORT if cloud_config.IS_CLOUD_RUN else settings.port
    uvicorn.run(app, host="0.0.0.0", port=port)
