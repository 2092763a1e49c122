import logging

from aiohttp import web

from src.application.updater_service import UpdaterService
from src.domain.exceptions import HookParseError

logger = logging.getLogger(__name__)


class HookHandler:
    """Receives registry webhooks and hands the parsed push event to the updater."""

    def __init__(self, updater: UpdaterService, translator):
        self.updater = updater
        self.translator = translator

    async def handle(self, request: web.Request) -> web.Response:
        body = await request.read()
        try:
            event = self.translator.to_domain(body)
        except HookParseError as e:
            logger.warning(f"Rejected webhook: {e}")
            return web.Response(status=400, text=str(e))

        logger.info(f"Received push for {event.repository_name} with tags {event.updated_tags}.")
        try:
            await self.updater.update_from_hook(event)
        except Exception as e:
            logger.exception(f"Failed to process push for {event.repository_name}: {e}")
            return web.Response(status=500, text=str(e))

        return web.Response(status=200, text="OK")


def create_app(handler: HookHandler) -> web.Application:
    app = web.Application()
    app.router.add_post("/", handler.handle)
    return app
