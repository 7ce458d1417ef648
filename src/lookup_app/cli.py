"""
Terminal front end for the address lookup.

Type an address to get suggestions, then pick one by number to resolve the
full place record. Results are cached in the local LanceDB store, so
repeating a query is answered without calling Google.

Usage:
    GOOGLE_MAPS_API_KEY=... python -m lookup_app.cli
"""

import asyncio

from rich.console import Console
from rich.prompt import Prompt

from common.config import DB_PATH
from common.logging_config import get_logger
from lookup_app.formatting import format_place, format_predictions, format_provenance
from orchestrator.core import AddressLookup, create_address_lookup
from place_store.lancedb_store import LanceDBPlaceStore
from places_client.core import GooglePlacesClient

logger = get_logger("lookup_app")

console = Console()

QUIT_COMMANDS = {"q", "quit", "exit"}


async def run_session(lookup: AddressLookup) -> None:
    """Prompt loop: query, show suggestions, optionally resolve one."""
    while True:
        text = await asyncio.to_thread(Prompt.ask, "[bold]Address[/bold] (q to quit)", default="")
        if text.strip().lower() in QUIT_COMMANDS:
            return

        outcome = await lookup.query(text)
        if not outcome.data:
            console.print("[dim]No suggestions.[/dim]")
            continue

        console.print(format_predictions(outcome.data))
        console.print(f"[dim]from {format_provenance(outcome)}[/dim]")

        choice = await asyncio.to_thread(Prompt.ask, "Pick a number (enter to search again)", default="")
        if not choice.isdigit() or not 1 <= int(choice) <= len(outcome.data):
            continue

        place = await lookup.select_prediction(outcome.data[int(choice) - 1])
        console.print(format_place(place))


async def main(db_path: str = DB_PATH) -> None:
    store = LanceDBPlaceStore(db_path)
    async with GooglePlacesClient() as places:
        lookup = create_address_lookup(places, places, store={"store": store})
        await run_session(lookup)


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
