#!/usr/bin/env python3
"""Development server runner for strprice."""

import uvicorn

from strprice.logging_setup import configure_logging

if __name__ == "__main__":
    configure_logging()
    uvicorn.run(
        "strprice.api:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info"
    )
