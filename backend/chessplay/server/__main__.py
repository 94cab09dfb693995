"""Run the chess server with uvicorn: python -m chessplay.server"""

import uvicorn

from chessplay.server.app import create_app
from chessplay.server.settings import GameServerSettings
from shared.logging import setup_logging


def main() -> None:  # pragma: no cover
    settings = GameServerSettings()
    setup_logging(log_dir=settings.log_dir)
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":  # pragma: no cover
    main()
