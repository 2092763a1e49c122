import asyncio
import os
import sys
import logging
import aiohttp
from aiohttp import web
from dotenv import load_dotenv

from src.application.updater_service import UpdaterService
from src.domain.exceptions import ConfigurationError
from src.infrastructure.acl import get_translator
from src.infrastructure.config_loader import load_repo_configuration
from src.infrastructure.github_client import DEFAULT_API_URL, GitHubRestClient
from src.infrastructure.http_handler import HookHandler, create_app

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "/etc/image-hooks/config.yaml"
DEFAULT_PARSER = "quay"
DEFAULT_PORT = 8080

async def main():
    # Load environment variables from .env file
    load_dotenv()

    github_token = os.getenv("GITHUB_TOKEN")
    config_path = os.getenv("IMAGE_HOOKS_CONFIG", DEFAULT_CONFIG_PATH)
    parser_name = os.getenv("IMAGE_HOOKS_PARSER", DEFAULT_PARSER)
    api_url = os.getenv("GITHUB_API_URL", DEFAULT_API_URL)

    if not github_token:
        logger.error("GITHUB_TOKEN is not set in the environment.")
        sys.exit(1)

    try:
        port = int(os.getenv("PORT", DEFAULT_PORT))
        repos = load_repo_configuration(config_path)
        translator = get_translator(parser_name)
    except (ConfigurationError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    logger.info(f"Loaded {len(repos.repositories)} repository configurations from {config_path}.")

    async with aiohttp.ClientSession() as session:
        gateway = GitHubRestClient(token=github_token, session=session, api_url=api_url)
        updater = UpdaterService(gateway=gateway, config=repos)
        app = create_app(HookHandler(updater, translator))

        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, port=port)
        await site.start()
        logger.info(f"image-hooks http starting on port {port} with parser {parser_name}.")

        try:
            await asyncio.Event().wait()
        finally:
            await runner.cleanup()

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user. Exiting gracefully.")
