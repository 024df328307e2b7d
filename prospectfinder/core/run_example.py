from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from dotenv import load_dotenv

from prospectfinder.providers.base import SearchQuery


async def main(argv=None):
    repo_root = Path(__file__).resolve().parents[2]
    load_dotenv(repo_root / ".env", override=False)

    # Settings read the environment on import, so load .env first.
    from prospectfinder.core.config import Settings
    from prospectfinder.core.orchestrator import SearchOrchestrator

    parser = argparse.ArgumentParser(description="Stream a prospect search to stdout.")
    parser.add_argument("--city", default="Vancouver")
    parser.add_argument("--state", default="BC")
    parser.add_argument("--country", default="Canada")
    parser.add_argument("--category", default="Cafe")
    parser.add_argument("--count", type=int, default=10)
    args = parser.parse_args(argv)

    cfg = Settings()
    logging.basicConfig(
        level=cfg.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    query = SearchQuery(
        city=args.city,
        state=args.state,
        country=args.country,
        category=args.category,
        requested_count=args.count,
    )
    orchestrator = SearchOrchestrator.from_settings(cfg)
    results = 0
    async for event in orchestrator.stream(query, search_id="example"):
        if event.type == "result":
            results += 1
            print(json.dumps(event.lead))
        else:
            print(f"[{event.type}] {event.message}")
    print(f"Got {results} results")


if __name__ == "__main__":
    asyncio.run(main())
