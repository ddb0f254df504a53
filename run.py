import subprocess

from cuisine_core.core.logging_config import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)

def run():
    logger.info("Starting Cultural Cuisine Core API (Uvicorn)...")
    backend = subprocess.Popen(["uvicorn", "cuisine_core.main:app", "--reload", "--port", "8000"])
    logger.info("API: http://localhost:8000 (docs at /docs). Press Ctrl+C to stop.")

    try:
        backend.wait()
    except KeyboardInterrupt:
        logger.info("Stopping API...")
        backend.terminate()
        logger.info("Done.")

if __name__ == "__main__":
    run()
