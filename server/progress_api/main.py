"""Progress Report API - FastAPI application entry point."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .routes import progress_router

settings = get_settings()

app = FastAPI(
    title="Wellness Progress Report API",
    description="Daily, weekly and monthly progress data from wellness check-ins",
    version="1.0.0",
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(progress_router)


@app.get("/health")
async def health_check():
    """Health check endpoint for the API."""
    return {"status": "healthy", "service": "progress-api"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server.progress_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
