# cli.py - terminal front-end for the grocery POS
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.text import Text
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from pos.config import get_settings
from pos.logging_config import configure_logging
from sdk.posclient import PosClient

console = Console()
c = PosClient()

# Latest session view returned by the API; everything on screen is drawn from it
session_view: Dict[str, Any] = {}

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


def session_id() -> str:
    return session_view.get("session_id", "")


def state() -> Dict[str, Any]:
    return session_view.get("state", {})


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]]):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title=f"📦 Products ({len(products)} items) - {state().get('selected_category', 'All')}",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=4)
    table.add_column("", width=3)
    table.add_column("Name", style="bold", width=20)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Cart", justify="right", width=6)
    table.add_column("Stock", justify="right", width=6)
    table.add_column("Category", width=12)

    for view in products:
        p = view["product"]
        remaining = view.get("remaining_stock", 0)
        stock_style = "dim" if remaining > 0 else "red"
        table.add_row(
            str(p["id"]),
            p.get("emoji", ""),
            p["name"],
            view["display_price"],
            str(view.get("in_cart", 0)),
            f"[{stock_style}]{remaining}[/{stock_style}]",
            p.get("category", "N/A")
        )
    console.print(table)


def show_cart(cart: Dict[str, Any]):
    totals = cart.get("totals", {})

    title = Text()
    title.append(f"🛒 Cart ({cart.get('count', 0)}) - ", style="bold")
    title.append(f"Total: {totals.get('display_grand_total', '$0.00')}", style="bold green")

    items = cart.get("items", [])
    if not items:
        console.print(Panel("Your cart is empty 🛍️", title=title, style="blue"))
        return

    table = Table(box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("ID", style="dim", width=4)
    table.add_column("Product", style="bold", width=24)
    table.add_column("Qty", justify="right", width=6)
    table.add_column("Subtotal", justify="right", width=12)

    for it in items:
        table.add_row(
            str(it["product"]["id"]),
            it["product"]["name"],
            str(it["quantity"]),
            it["display_subtotal"],
        )
    table.add_row("", "[dim]Subtotal[/dim]", "", totals.get("display_subtotal", ""))
    table.add_row("", "[dim]Tax[/dim]", "", totals.get("display_tax", ""))
    table.add_row("", "[bold]Grand total[/bold]", "", f"[bold]{totals.get('display_grand_total', '')}[/bold]")

    console.print(Panel(table, title=title, border_style="blue"))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


def flush_status_message():
    """Show the session's pending status message once, then acknowledge it."""
    message = state().get("status_message")
    if not message:
        return
    console.print(show_status(message, "success" in message.lower()))
    try_api(c.dismiss_message, session_id())
    state()["status_message"] = None


# ---------------------------
# API wrapper
# ---------------------------
def try_api(fn, *args, spinner: str = "Processing...", **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner. Returns the decoded JSON or
    None when the call failed (the error is shown in a red status panel).
    """
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description=spinner, total=None)
            return fn(*args, **kwargs)
    except Exception as e:
        console.print(show_status(f"Error: {e}", False))
        return None


def end_session():
    if session_id():
        try_api(c.end_session, session_id())


def refresh(view: Optional[Dict[str, Any]] = None):
    global session_view
    view = view or try_api(c.get_session, session_id())
    if view:
        session_view = view


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_product_completer():
    views = session_view.get("visible_products", [])
    ids = [str(v["product"]["id"]) for v in views]
    return WordCompleter(ids, ignore_case=True)


def get_category_completer():
    return WordCompleter(state().get("categories", []), ignore_case=True)


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_product_id() -> Optional[int]:
    raw = prompt_with_autocomplete("Enter product ID", completer=get_product_completer()).strip()
    try:
        return int(raw)
    except ValueError:
        console.print("[red]Please enter a numeric product ID.[/red]")
        return None


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    cart_badge = f"🛒 {session_view.get('cart_count', 0)}"
    header.add_row(
        "🛍️ Grocery POS",
        f"[bold blue]Point of Sale[/bold blue]  {cart_badge}",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
def menu():
    console.clear()
    refresh(try_api(c.start_session, spinner="Loading catalog..."))
    if not session_view:
        sys.exit(1)
    console.print(create_header())

    while True:
        flush_status_message()

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "5", "🛒 View cart"),
            ("2", "🏷️ Select category", "6", "👁️ Toggle cart panel"),
            ("3", "➕ Add to cart", "7", "✅ Submit order"),
            ("4", "✏️ Change quantity", "8", "🔄 Reload catalog"),
            ("", "", "q", "👋 Quit")
        ]

        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))
        if state().get("is_cart_expanded"):
            show_cart(try_api(c.view_cart, session_id()) or {})

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 9)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            refresh()
            show_products(session_view.get("visible_products", []))

        elif choice == "2":
            category = prompt_with_autocomplete("Category", completer=get_category_completer(), default="All")
            refresh(try_api(c.select_category, session_id(), category.strip()))
            show_products(session_view.get("visible_products", []))

        elif choice == "3":
            pid = ask_product_id()
            if pid is not None:
                try_api(c.add_to_cart, session_id(), pid)
                refresh()

        elif choice == "4":
            pid = ask_product_id()
            if pid is not None:
                qty = IntPrompt.ask("New quantity (0 removes)", default=1)
                try_api(c.update_quantity, session_id(), pid, qty)
                refresh()

        elif choice == "5":
            show_cart(try_api(c.view_cart, session_id()) or {})

        elif choice == "6":
            try_api(c.toggle_cart, session_id())
            refresh()

        elif choice == "7":
            if not session_view.get("cart_count"):
                console.print("[italic yellow]Cart is empty[/italic yellow]")
            elif Confirm.ask(f"Submit order for {session_view['totals']['display_grand_total']}?"):
                refresh(try_api(c.submit_order, session_id(), spinner="Submitting order..."))

        elif choice == "8":
            refresh(try_api(c.reload_catalog, session_id(), spinner="Loading catalog..."))

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                end_session()
                console.print(Panel.fit("[bold green]Thank you for shopping! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


def main():
    configure_logging(get_settings().log_level)
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        end_session()
        sys.exit(1)


if __name__ == "__main__":
    main()
