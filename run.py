#!/usr/bin/env python3
"""thumbserve - on-demand image resizing server"""

import argparse
import logging
import os
from pathlib import Path

import uvicorn

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="thumbserve image server")
    parser.add_argument("--images", type=str, help="Directory holding full/ and thumb/ image folders")
    parser.add_argument("--host", type=str, default="0.0.0.0")
    parser.add_argument("--port", type=int, default=3000)
    args = parser.parse_args()

    if args.images:
        images_path = Path(args.images).resolve()
        logging.info(f"Setting images directory to: {images_path}")
        os.environ["THUMBSERVE_IMAGES_DIR"] = str(images_path)

    logging.info(f"Please open http://localhost:{args.port} to review the project ...")

    uvicorn.run(
        "thumbserve.server.app:app",
        host=args.host,
        port=args.port,
        reload=False,
    )
