"""
Dev server: page + API on one port.

Usage:
    python -m ocr_scanner.scripts.run_server
    HOST=0.0.0.0 PORT=8080 python -m ocr_scanner.scripts.run_server
"""

import os
import uvicorn


def main():
    uvicorn.run(
        "ocr_scanner.web.app:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    main()
