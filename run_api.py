"""Run the PolicyKit API server."""

import uvicorn

from policykit.api.config import Settings

if __name__ == "__main__":
    settings = Settings()
    uvicorn.run(
        "policykit.api:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
