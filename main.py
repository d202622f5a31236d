"""FrameSearch - embeddable web search

Simple CLI for running a search from the terminal or serving the API.
"""

import argparse
import asyncio
import sys

from framesearch.models.interfaces import SearchQuery
from framesearch.services.errors import SearchPipelineError
from framesearch.services.http_client import shared_client
from framesearch.services.search_pipeline import run_search


async def run_query(query: str, filter_embeddable: bool) -> int:
    """Run one search and print the results."""
    print(f"Search query: {query}")
    print("-" * 50)

    try:
        outcome = await run_search(SearchQuery(text=query, filter_embeddable=filter_embeddable))
    except SearchPipelineError as e:
        print(f"[!] Error: {e.to_body()}")
        return 1
    finally:
        await shared_client.release()

    print(
        f"[*] {outcome.candidates_fetched} candidates, {outcome.candidates_probed} probed, "
        f"{outcome.displayable_count} displayable"
    )
    for i, entry in enumerate(outcome.items, 1):
        marker = {True: "+", False: "x", None: "?"}[entry.displayable]
        print(f"  [{marker}] {i}. {entry.item.title[:80]}")
        print(f"       {entry.item.link}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="FrameSearch embeddable web search")
    parser.add_argument("--query", "-q", help="Search query")
    parser.add_argument(
        "--filter",
        "-f",
        action="store_true",
        help="Drop known non-embeddable domains and fetch more pages",
    )
    parser.add_argument("--serve", action="store_true", help="Run the HTTP API with uvicorn")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()

    if args.serve:
        import uvicorn

        uvicorn.run("framesearch.main:app", host=args.host, port=args.port)
        return

    if not args.query:
        parser.error("--query is required unless --serve is given")

    sys.exit(asyncio.run(run_query(args.query, args.filter)))


if __name__ == "__main__":
    main()
