"""FastAPI application bootstrap and routing setup."""

import logging
from dotenv import load_dotenv
from fastapi import FastAPI
from termcolor import colored
from fastapi.middleware.cors import CORSMiddleware
from stylefusion.utility.logger import AppLogger
from stylefusion.utility.path_finder import Finder
from stylefusion.handlers.error_handler import MapExceptions as me
from stylefusion.services.image_generation_service.main import ImageGeneration as ig
from stylefusion.controller.fusion_controller import router as fusion_router
from stylefusion.controller.text_to_image_controller import router as text_router

load_dotenv(Finder().get_directory("root") / ".env")
AppLogger.init(
    level=logging.INFO,
    log_to_file=True,
)

app = FastAPI(title="Style Fusion Studio")
me.register_exception_handlers(app)
logger = AppLogger.get_logger(__name__)

mode = ig.run_mode()
logger.info(colored(f"Running in {mode} mode", "yellow"))

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(fusion_router)
app.include_router(text_router)


@app.get("/", tags=["Health"])
def root():
    """Health probe indicating API wiring and logger setup succeeded."""
    return {"status": "ok", "message": "Setup Successful", "mode": mode}


@app.get("/health", tags=["Health"])
def health_check():
    """Secondary health endpoint used by deployments and monitoring probes."""
    return {"status": "ok", "message": "FastAPI server running!", "mode": mode}
