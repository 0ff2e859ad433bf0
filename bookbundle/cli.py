"""Command-line interface using Click + Rich."""

import asyncio
import logging
import shlex

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bookbundle.adapters.aladin import AladinCartAdapter
from bookbundle.bundle import MIN_BUNDLE_SIZE
from bookbundle.capture import capture_cart, fetch_cart_html
from bookbundle.client import BookBundleClient
from bookbundle.codec import build_handoff_url, import_handoff
from bookbundle.config import load_config
from bookbundle.covers import ALADIN_COVER_SIZES
from bookbundle.errors import BundleTooSmall, ExtractionEmpty, NotOnTargetPage
from bookbundle.models import BookRecord, BundleResult, Condition, SearchResult, SelectedBook
from bookbundle.session import WishlistSession

console = Console()

_CONDITION_NAMES = [c.name.lower() for c in Condition]


def _won(amount: int | None) -> str:
    return f"{amount:,}원" if amount else "-"


def _records_table(records: list[BookRecord], title: str) -> Table:
    table = Table(title=title, show_lines=True)
    table.add_column("Item ID", style="dim")
    table.add_column("Title", style="white", max_width=40)
    table.add_column("Condition", style="yellow")
    table.add_column("Price", style="green", justify="right")
    table.add_column("Qty", justify="right")

    for r in records:
        table.add_row(str(r.item_id), escape(r.title), r.condition.value, _won(r.unit_price), str(r.quantity))
    return table


def _selection_table(books: tuple[SelectedBook, ...] | list[SelectedBook]) -> Table:
    table = Table(title=f"Wishlist ({len(books)} books)")
    table.add_column("Item ID", style="dim")
    table.add_column("Title", style="white", max_width=40)
    table.add_column("Min condition", style="yellow")
    table.add_column("Price", style="green", justify="right")

    for b in books:
        table.add_row(str(b.item_id), escape(b.title), b.min_condition.value, _won(b.unit_price))
    return table


def _search_table(results: list[SearchResult], keyword: str) -> Table:
    table = Table(title=f"Results for: {escape(keyword)}")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Item ID", style="dim")
    table.add_column("Title", style="white", max_width=40)
    table.add_column("Author", style="dim", max_width=24)
    table.add_column("Price", style="green", justify="right")
    table.add_column("Used", justify="right")
    table.add_column("Used from", style="green", justify="right")

    for i, r in enumerate(results, start=1):
        table.add_row(
            str(i),
            str(r.item_id),
            escape(r.title),
            escape(r.author or "-"),
            _won(r.price_sales or r.price_standard),
            str(r.used_count or 0),
            _won(r.used_min_price),
        )
    return table


def _print_bundle(result: BundleResult) -> None:
    total = result.total_requested_count
    if result.has_complete_seller:
        console.print("[bold green]At least one seller has every book.[/bold green]")

    table = Table(title=f"Sellers ({result.analysis_time_ms} ms)", show_lines=True)
    table.add_column("Seller", style="cyan")
    table.add_column("Books", justify="right")
    table.add_column("Coverage", justify="right")
    table.add_column("Total", style="green", justify="right")
    table.add_column("Titles", style="white", max_width=40)
    table.add_column("Shop", style="blue", max_width=50)

    for s in result.sellers:
        owned = f"{s.total_book_count}/{total}"
        if s.is_complete(total):
            owned = f"[bold green]{owned}[/bold green]"
        table.add_row(
            escape(s.seller_name),
            owned,
            f"{s.coverage(total):.0%}",
            _won(s.total_price),
            escape("\n".join(b.title for b in s.books)),
            s.shop_url,
        )

    console.print(table)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def main(verbose: bool):
    """BookBundle: find used-book sellers who stock your whole wishlist."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("html_file", type=click.File("r", encoding="utf-8"), required=False)
@click.option("--page-url", default=None, help="Address the saved page was taken from.")
@click.option("--url", "live_url", default=None, help="Render the cart page in a browser (browser extra).")
@click.option(
    "--profile",
    default=None,
    type=click.Path(file_okay=False),
    help="Browser profile directory holding your marketplace login.",
)
@click.option(
    "--cover-size",
    type=click.Choice(sorted(ALADIN_COVER_SIZES)),
    default=None,
    help="Cover variant to link (defaults to config).",
)
@click.option("--open", "open_app", is_flag=True, help="Open the wishlist app with the books.")
def capture(
    html_file,
    page_url: str | None,
    live_url: str | None,
    profile: str | None,
    cover_size: str | None,
    open_app: bool,
):
    """Capture the books in a cart page and hand them to the wishlist app."""
    config = load_config()
    adapter = AladinCartAdapter(cover_size or config.cover_size)

    try:
        if live_url:
            with console.status("Reading cart..."):
                html = asyncio.run(fetch_cart_html(live_url, user_data_dir=profile))
            page_url = live_url
        elif html_file is not None:
            html = html_file.read()
        else:
            raise click.UsageError("Give a saved cart page or --url.")

        records = capture_cart(html, page_url=page_url, adapter=adapter)
    except NotOnTargetPage as e:
        console.print(f"[yellow]{e}[/yellow]")
        return
    except ExtractionEmpty as e:
        console.print(f"[yellow]{e}[/yellow] Check the items in your cart and try again.")
        return
    except RuntimeError as e:
        console.print(f"[red]{e}[/red]")
        return

    console.print(_records_table(records, f"Captured {len(records)} books"))

    url = build_handoff_url(config.app_url, records)
    console.print("[bold]Handoff URL:[/bold]")
    click.echo(url)

    if open_app:
        click.launch(url)


@main.command()
@click.argument("url")
def decode(url: str):
    """Show the books carried by a handoff URL."""
    handoff = import_handoff(url)
    if not handoff.imported:
        console.print("[yellow]Nothing to import from this address.[/yellow]")
        return

    console.print(_selection_table(handoff.books))
    console.print(f"[dim]Address after import:[/dim] {handoff.clean_url}")


@main.command()
@click.argument("keyword")
def search(keyword: str):
    """Search titles on the backend."""
    config = load_config()

    async def _search():
        async with BookBundleClient(config.api_base_url, config.timeout) as client:
            session = WishlistSession(client)
            await session.search(keyword)
            return session

    with console.status("Searching..."):
        session = asyncio.run(_search())

    if session.error:
        console.print(f"[red]{session.error}[/red]")
        return
    if not session.search_results:
        console.print("[yellow]No results found.[/yellow]")
        return

    console.print(_search_table(session.search_results, keyword))


@main.command()
@click.argument("url")
def analyze(url: str):
    """Import a handoff URL and find sellers for its books."""
    config = load_config()

    async def _analyze():
        async with BookBundleClient(config.api_base_url, config.timeout) as client:
            session = WishlistSession(client)
            session.load_from_url(url)
            await session.analyze()
            return session

    try:
        with console.status("Analyzing..."):
            session = asyncio.run(_analyze())
    except BundleTooSmall as e:
        console.print(f"[yellow]{e}[/yellow]")
        return

    if session.error:
        console.print(f"[red]{session.error}[/red]")
        return

    _print_bundle(session.bundle_result)


@main.command()
def health():
    """Check whether the backend is reachable."""
    config = load_config()

    async def _health():
        async with BookBundleClient(config.api_base_url, config.timeout) as client:
            return await client.health()

    if asyncio.run(_health()):
        console.print(f"[green]Backend is up[/green] ({config.api_base_url})")
    else:
        console.print(f"[red]Backend is unreachable[/red] ({config.api_base_url})")


@main.command()
@click.option("--force", is_flag=True, help="Overwrite existing config file.")
def init(force: bool):
    """Create a default config file in the user config directory."""
    from bookbundle.config import write_default_config

    path = write_default_config(force=force)
    console.print(f"[green]Config written to:[/green] {path}")


_SHELL_HELP = f"""\
search <keyword>        search titles
add <n> [condition]     add search result n to the wishlist
rm <item id>            remove a book
cond <item id> <cond>   set one book's minimum condition
cond-all <cond>         set every book's minimum condition
list                    show the wishlist
analyze                 find sellers (needs {MIN_BUNDLE_SIZE}+ books)
dismiss                 clear the last error
quit                    leave (the wishlist is not kept)
conditions: {", ".join(_CONDITION_NAMES)}"""


@main.command()
@click.argument("url", required=False)
def shell(url: str | None):
    """Curate a wishlist interactively, optionally starting from a handoff URL."""
    config = load_config()
    asyncio.run(_run_shell(url, config))


async def _run_shell(url, config) -> None:
    async with BookBundleClient(config.api_base_url, config.timeout) as client:
        session = WishlistSession(client)

        if url:
            session.load_from_url(url)
            if session.imported_count:
                console.print(
                    f"[green]Imported {session.imported_count} books from your cart.[/green] "
                    "Check the conditions, then run 'analyze'."
                )
                session.dismiss_import_notice()
                console.print(_selection_table(session.store.list()))

        while True:
            try:
                line = click.prompt("bookbundle", prompt_suffix="> ", default="", show_default=False)
            except click.Abort:
                break

            try:
                args = shlex.split(line)
            except ValueError as e:
                console.print(f"[red]{e}[/red]")
                continue
            if not args:
                continue

            command, rest = args[0].lower(), args[1:]
            if command in ("quit", "exit"):
                break
            try:
                await _shell_command(session, command, rest)
            except (ValueError, IndexError):
                console.print("[red]Invalid arguments.[/red] Type 'help' for usage.")


async def _shell_command(session: WishlistSession, command: str, args: list[str]) -> None:
    if command == "help":
        console.print(_SHELL_HELP, markup=False)

    elif command == "search":
        keyword = " ".join(args)
        await session.search(keyword)
        if session.error:
            console.print(f"[red]{session.error}[/red]")
        elif session.search_results:
            console.print(_search_table(session.search_results, keyword))
        else:
            console.print("[yellow]No results found.[/yellow]")

    elif command == "add":
        index = int(args[0]) - 1
        if index < 0:
            raise IndexError(index)
        condition = _parse_condition(args[1]) if len(args) > 1 else Condition.GOOD
        if session.add_result(index, condition):
            console.print(f"[green]Added[/green] {session.search_results[index].title}")
        else:
            console.print("[yellow]Already in the wishlist.[/yellow]")

    elif command == "rm":
        item_id = int(args[0])
        if not session.store.remove(item_id):
            console.print(f"[yellow]Item {item_id} is not in the wishlist.[/yellow]")

    elif command == "cond":
        item_id = int(args[0])
        if not session.store.update_condition(item_id, _parse_condition(args[1])):
            console.print(f"[yellow]Item {item_id} is not in the wishlist.[/yellow]")

    elif command == "cond-all":
        session.store.update_all_conditions(_parse_condition(args[0]))

    elif command == "list":
        console.print(_selection_table(session.store.list()))

    elif command == "analyze":
        try:
            await session.analyze()
        except BundleTooSmall as e:
            console.print(f"[yellow]{e}[/yellow]")
            return
        if session.error:
            console.print(f"[red]{session.error}[/red] Run 'analyze' to retry.")
        elif session.bundle_result is not None:
            _print_bundle(session.bundle_result)

    elif command == "dismiss":
        session.dismiss_error()

    else:
        console.print(f"[red]Unknown command:[/red] {command}. Type 'help' for usage.")


def _parse_condition(value: str) -> Condition:
    condition = Condition.parse(value)
    if condition is None:
        raise ValueError(f"Unknown condition {value!r}")
    return condition


if __name__ == "__main__":
    main()
