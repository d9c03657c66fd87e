"""
Command Line Interface

    integral-rag init   [--data-dir DIR]
    integral-rag query  [--network-id N] [--limit K]
    integral-rag serve  [--host HOST] [--port PORT]

`init` loads and embeds the CSV sources, `query` starts an interactive prompt
loop against one network, `serve` runs the HTTP API.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Callable, List, Optional, Sequence, assert_never

from .config import settings
from .db import AsyncSessionLocal, ContentRepository, async_engine, init_models
from .embeddings.embedder import Embedder
from .ingestion.csv_loader import CsvLoader
from .ingestion.pipeline import ingest_all
from .logging_config import setup_logging
from .records import Network
from .retrieval.models import PostResult, ProfileResult, RankedResult
from .retrieval.service import Retriever

logger = logging.getLogger("rag.cli")

InputFn = Callable[[str], str]


# ---------------------------------------------------------------------
# Output formatting
# ---------------------------------------------------------------------

def format_results(results: Sequence[RankedResult]) -> str:
    """
    Render ranked results the way the interactive mode prints them.
    """
    if not results:
        return "No relevant content found."

    lines: List[str] = []
    for index, result in enumerate(results, start=1):
        lines.append(f"#{index} ({result.kind}) - Similarity: {result.score:.4f}")
        match result:
            case PostResult(item=post):
                lines.append(f"Author: {post.author}")
                lines.append(f"Content: {post.content}")
            case ProfileResult(item=profile):
                lines.append(f"Name: {profile.name}")
                lines.append(f"Bio: {profile.bio}")
            case _:
                assert_never(result)
        lines.append("")
    return "\n".join(lines)


def parse_network_choice(raw: str, networks: Sequence[Network]) -> Optional[Network]:
    """Return the network whose id was typed, or None if invalid."""
    try:
        network_id = int(raw.strip())
    except ValueError:
        return None
    return next((n for n in networks if n.id == network_id), None)


# ---------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------

async def run_init(data_dir: Optional[str]) -> int:
    print("Initializing database connection...")
    try:
        await init_models()

        print("Loading data from CSV files...")
        async with AsyncSessionLocal() as session:
            repository = ContentRepository(session)
            print("Generating embeddings and storing data...")
            stats = await ingest_all(repository, Embedder(), CsvLoader(data_dir))
            await repository.commit()
    except Exception:
        logger.exception("Error initializing database")
        return 1
    finally:
        await async_engine.dispose()

    print(
        f"Loaded {stats.networks} networks, {stats.profiles} profiles, "
        f"{stats.posts} posts, {stats.members} members"
    )
    print("Database initialized and data loaded successfully!")
    return 0


async def query_loop(
    repository: ContentRepository,
    retriever: Retriever,
    network_id: Optional[int],
    limit: int,
    read: InputFn = input,
) -> int:
    """
    Interactive query mode.

    Returns the process exit code.
    """
    networks = await repository.get_all_networks()
    if not networks:
        print("No networks found. Please run the init command first.")
        return 1

    print("\n=== Integral RAG System - Interactive Query Mode ===\n")
    print("Available networks:")
    for network in networks:
        print(f"  {network.id}: {network.name}")

    if network_id is None:
        raw = read("\nEnter network ID: ")
    else:
        raw = str(network_id)

    network = parse_network_choice(raw, networks)
    if network is None:
        print("Invalid network ID. Please try again.")
        return 1

    print(f"\nSelected network: {network.name}\n")

    while True:
        try:
            prompt = read('Enter your query (or "exit" to quit): ')
        except EOFError:
            prompt = "exit"

        if prompt.strip().lower() == "exit":
            print("Goodbye!")
            return 0

        if not prompt.strip():
            continue

        try:
            results = await retriever.retrieve_relevant_content(prompt, network.id, limit)
        except Exception:
            logger.exception("Error processing query")
            return 1

        print("\n=== Results ===\n")
        print(format_results(results))


async def run_query(network_id: Optional[int], limit: int) -> int:
    try:
        async with AsyncSessionLocal() as session:
            repository = ContentRepository(session)
            retriever = Retriever(repository, Embedder())
            return await query_loop(repository, retriever, network_id, limit)
    finally:
        await async_engine.dispose()


def run_serve(host: str, port: int) -> int:
    import uvicorn

    uvicorn.run("integral_rag.main:app", host=host, port=port)
    return 0


# ---------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------

def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="integral-rag",
        description="CLI for Integral RAG System",
    )
    ap.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = ap.add_subparsers(dest="command")

    init = sub.add_parser("init", help="Initialize the database and load data from CSV files")
    init.add_argument("--data-dir", default=None, help=f"CSV directory (default: {settings.data_dir})")

    query = sub.add_parser("query", help="Start interactive query mode")
    query.add_argument("--network-id", type=int, default=None, help="Skip the network prompt")
    query.add_argument("--limit", type=int, default=settings.default_result_limit)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=3000)

    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_argparser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.command == "init":
        return asyncio.run(run_init(args.data_dir))
    if args.command == "query":
        if args.limit < 1:
            parser.error("--limit must be a positive integer")
        return asyncio.run(run_query(args.network_id, args.limit))
    if args.command == "serve":
        return run_serve(args.host, args.port)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
