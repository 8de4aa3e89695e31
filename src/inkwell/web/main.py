"""
Entry point for the Inkwell server.

Run with:
    uvicorn inkwell.web.main:app --reload

or:
    inkwell
"""

import uvicorn

from inkwell.core.config import inkwell_settings

from .app import create_app

app = create_app(inkwell_settings)


def run() -> None:
    uvicorn.run(
        "inkwell.web.main:app",
        host="0.0.0.0",
        port=8000,
        reload=inkwell_settings.is_development(),
        log_level=inkwell_settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
