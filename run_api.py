"""
API Server Runner

Entry point for running the scanner API with uvicorn. Prepares the
environment and data directories, checks that provider keys are
configured, then starts the server.
"""

import argparse
import logging
import os
import sys
import traceback

import uvicorn
from dotenv import load_dotenv

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("api_runner")

PROVIDER_KEY_VARIABLES = ("SAFE_BROWSING_API_KEYS", "VIRUSTOTAL_API_KEYS")


def parse_arguments():
    """Parse command line arguments for the API server."""
    parser = argparse.ArgumentParser(description="Run the Secure Inbox scanner API server")

    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1)"
    )

    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind the server to (default: 8000)"
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development"
    )

    parser.add_argument(
        "--env",
        type=str,
        choices=["development", "testing", "production"],
        default="development",
        help="Environment to run in (default: development)"
    )

    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="Environment file with provider keys (default: .env)"
    )

    return parser.parse_args()


def setup_environment(env: str, env_file: str) -> None:
    """
    Load the environment file and create runtime directories.

    Args:
        env: Environment name (development, testing, production)
        env_file: Path to a dotenv file; missing files are ignored
    """
    if load_dotenv(env_file):
        logger.info(f"Loaded environment from {env_file}")

    os.environ["ENVIRONMENT"] = env
    os.environ["DEBUG"] = "true" if env in ["development", "testing"] else "false"

    for directory in (os.environ.get("STATS_STORAGE_PATH", "data/secure"), "logs"):
        os.makedirs(directory, exist_ok=True)
        logger.info(f"Ensured directory exists: {directory}")


def verify_provider_keys() -> None:
    """
    Warn about reputation providers that have no keys.

    Without keys every link check ends in a failed-check warning, so the
    server still starts but link scanning is effectively off.
    """
    for variable in PROVIDER_KEY_VARIABLES:
        keys = [k for k in os.environ.get(variable, "").split(",") if k.strip()]
        if keys:
            logger.info(f"{variable}: {len(keys)} key(s) configured")
        else:
            logger.warning(f"{variable} is not set; link checks with this provider will fail")


def main():
    """Run the API server."""
    args = parse_arguments()

    setup_environment(args.env, args.env_file)
    verify_provider_keys()

    logger.info(f"Starting API server in {args.env} mode")
    logger.info(f"Server will be available at http://{args.host}:{args.port}")

    if args.env == "development":
        logger.info(f"API documentation will be available at http://{args.host}:{args.port}/docs")

    uvicorn.run(
        "api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info" if args.env == "production" else "debug"
    )


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Error running server: {str(e)}")
        logger.error(traceback.format_exc())
        sys.exit(1)
