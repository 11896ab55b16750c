"""Run script for the document catalog service"""

import uvicorn

from document_catalog.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "document_catalog.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
