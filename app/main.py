from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import os
from dotenv import load_dotenv

# Load .env variables
load_dotenv()

# Configure base logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger("app")

from app.routers import users, clubs, events, challenges
from app.database import engine, Base, SessionLocal
from app.init_db import create_initial_admins
from app.services.errors import DomainError
import uvicorn

app = FastAPI(
    title="Redline API",
    description="API for car clubs: memberships, events, challenges and payouts",
    version="1.0.0",
)


@app.on_event("startup")
def on_startup():
    # Create database tables
    Base.metadata.create_all(bind=engine)

    # Initialize super admins
    logger.info("Initializing database with super admins...")
    db = SessionLocal()
    try:
        create_initial_admins(db)
    finally:
        db.close()


# Configure CORS
cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(clubs.router, prefix="/clubs", tags=["clubs"])
app.include_router(events.router, prefix="/events", tags=["events"])
app.include_router(challenges.router, prefix="/challenges", tags=["challenges"])


@app.get("/")
def read_root():
    return {"message": "Welcome to Redline API"}


# Domain errors -> status HTTP del tipo de error
@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind},
    )


# Global unhandled exception handler -> logs ERROR
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled error | path=%s | method=%s | client=%s",
        request.url.path,
        request.method,
        request.client.host if request.client else "unknown",
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=5009, reload=True)
