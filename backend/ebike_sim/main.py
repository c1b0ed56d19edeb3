import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from ebike_sim.config import settings
from ebike_sim.routes import analysis_router, components_router, health_router, simulation_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Backend API for the e-bike drivetrain simulator"
)

# Configure CORS
origins = [
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:8000",
    "*"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include Routers
app.include_router(health_router, prefix=settings.API_PREFIX, tags=["Health"])
app.include_router(components_router, prefix=settings.API_PREFIX, tags=["Components"])
app.include_router(simulation_router, prefix=settings.API_PREFIX, tags=["Simulation"])
app.include_router(analysis_router, prefix=settings.API_PREFIX, tags=["Analysis"])

# Monitoring
Instrumentator().instrument(app).expose(app)

@app.get("/")
async def root():
    """
    Root endpoint to verify service is running.
    """
    return {
        "message": "Welcome to EBike_Simulator API",
        "version": settings.VERSION,
        "docs": "/docs"
    }
