from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

# Only load .env file if not running on Heroku
if not os.getenv("DYNO"):  # DYNO is a Heroku-specific environment variable
    from dotenv import load_dotenv
    load_dotenv()

from config.settings import settings
from api import lens, upload_image

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.PROJECT_NAME} ({'heroku' if os.getenv('DYNO') else 'local'})")
    logger.info(f"Image editing: {'enabled' if settings.edit_enabled else 'disabled'}")
    logger.info(f"Supabase storage: {'enabled' if settings.storage_enabled else 'disabled'}")

    yield

    # Let pending uploads finish before shutting down
    controller = lens._controller
    if controller is not None:
        await controller.drain()
    logger.info(f"Shutting down {settings.PROJECT_NAME}")


app = FastAPI(title="Snap Banana Lens API", version=settings.VERSION, lifespan=lifespan)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(lens.router, prefix="/api")
app.include_router(upload_image.router)

@app.get("/")
async def root():
    return {"message": "Snap Banana Lens API is running"}

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

@app.get("/api/environment")
async def get_environment_info():
    is_heroku = bool(os.getenv("DYNO"))
    return {
        "environment": "heroku" if is_heroku else "local",
        "is_heroku": is_heroku,
        "port": os.getenv("PORT", "8000"),
        "config_source": "heroku_env" if is_heroku else "dotenv_file"
    }

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", settings.PORT))
    uvicorn.run(app, host=settings.HOST, port=port)
