"""EcoNarrative Studio: server launcher and legacy migration entry point."""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5001"))


def main():
    parser = argparse.ArgumentParser(description="EcoNarrative Studio server")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Data storage directory (default: ./data)")
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--reload", action="store_true",
                        help="Restart the server on code changes")
    parser.add_argument("--migrate-legacy", metavar="USERNAME", default=None,
                        help="Import data/worlds/*.json into USERNAME's projects and exit")
    args = parser.parse_args()

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Make the app module (imported by uvicorn) see the same data dir
    if args.data_dir:
        os.environ["DATA_DIR"] = str(args.data_dir.resolve())

    if args.migrate_legacy:
        from econarrative import storage
        storage.init_storage(args.data_dir or Path(os.getenv("DATA_DIR", "data")))
        created = storage.migrate_legacy_worlds(args.migrate_legacy)
        for meta in created:
            print(f"  {meta['slug']}  ({meta['name']})")
        print(f"Migrated {len(created)} world(s) for {args.migrate_legacy}")
        sys.exit(0)

    import uvicorn

    print(f"Starting backend on http://localhost:{args.port} ...")
    uvicorn.run("econarrative.app:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
