"""FastAPI main application for the Shithead game backend"""

import logging
import os
from typing import Optional

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config import ServerSettings
from .engine import ShitheadEngine
from .ws import GameServer

logger = logging.getLogger(__name__)


def create_app(settings: Optional[ServerSettings] = None, engine: Optional[ShitheadEngine] = None) -> FastAPI:
    settings = settings or ServerSettings.from_env()
    game_server = GameServer(engine)

    app = FastAPI(title="Shithead Card Game API", version="1.0.0")
    app.state.game_server = game_server

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "rooms": len(game_server.engine.store),
            "connections": game_server.connection_manager.connection_count(),
        }

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await game_server.handle_websocket(websocket)

    if os.path.isdir(settings.static_dir):
        # Mounted last so the API routes above take precedence
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
        logger.info(f"Serving client files from {settings.static_dir}")
    else:
        @app.get("/")
        async def root():
            return {"message": "Shithead Card Game API", "version": "1.0.0"}

    return app


settings = ServerSettings.from_env()

# Configure logging
logging.basicConfig(level=settings.log_level.upper())

app = create_app(settings)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
