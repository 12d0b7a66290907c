import logging
from fastapi import FastAPI
from schedura.config import get_settings
from schedura.routes import schedule
from schedura.scheduling import __version__

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create FastAPI app
app = FastAPI(
    title="Schedura API",
    description="Places tasks into free calendar slots around existing busy blocks",
    version=__version__
)

# Include routers
app.include_router(schedule.router, prefix="/schedule", tags=["schedule"])

@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": "Welcome to Schedura API",
        "version": __version__,
        "features": [
            "Priority-ordered greedy task placement",
            "Timezone-aware working hours",
            "Free window search"
        ],
        "endpoints": {
            "schedule": "POST /schedule/ - Propose slots for tasks around busy blocks",
            "availability": "POST /schedule/availability - List free windows of a given length"
        },
        "swagger_ui": "/docs - Interactive API documentation",
        "redoc": "/redoc - Alternative API documentation"
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}

# This allows running the app directly with: python -m schedura.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("schedura.main:app", host=settings.host, port=settings.port, reload=True)
