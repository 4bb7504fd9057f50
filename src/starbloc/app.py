"""
starbloc Application Configurator

🚀 Complete application setup:
Builds the counter processor, wires it into a FastHTML app through the
connector routes, and ties the processor's lifetime to the ASGI lifespan.
"""

import logging
import uuid
from typing import Optional

from fasthtml.common import FastHTML

from .counter import CounterEvent, build_counter_processor
from .events.processor import EventProcessor
from .infrastructure.configuration import ApplicationConfig, setup_logging
from .web.connector import register_processor_routes

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[ApplicationConfig] = None,
    processor: Optional[EventProcessor] = None,
) -> FastHTML:
    """
    Create the FastHTML app serving the counter.

    Args:
        config: Application configuration (defaults to environment variables)
        processor: Processor to expose (defaults to a fresh counter processor)
    """
    config = config or ApplicationConfig.from_environment()
    processor = processor or build_counter_processor(config=config.processor)

    async def lifespan(app):
        await processor.start()
        logger.info(f"Serving {processor.registry!r} under {config.web.prefix}")
        try:
            yield
        finally:
            await processor.close()

    app = FastHTML(
        debug=config.web.debug,
        secret_key=config.web.secret_key or uuid.uuid4().hex,
        lifespan=lifespan,
    )
    app.state.processor = processor
    app.state.config = config

    register_processor_routes(
        app.route,
        processor,
        CounterEvent.parse,
        prefix=config.web.prefix,
        heartbeat=config.web.live_heartbeat_seconds,
    )
    return app


def main() -> None:
    import uvicorn

    config = ApplicationConfig.from_environment()
    setup_logging(config.logging)
    app = create_app(config)

    print("\n" + "="*60)
    print(f"🎉 starbloc counter on http://{config.web.host}:{config.web.port}{config.web.prefix}")
    print("="*60)

    uvicorn.run(app, host=config.web.host, port=config.web.port, log_level=config.logging.level.lower())
