"""
Salt - CLI Entry Point.

Usage:
    salt import <url>        Import a recipe from a web page or social link
    salt search <query>      Search the recipe catalog
    salt sections            Show explore shelves
    salt suggest <query>     Autocomplete recipe titles
    salt health              Check configuration
    salt serve               Run the web API
    salt --help              Show help
"""

import asyncio

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table

app = typer.Typer(
    name="salt",
    help="Salt - Import, browse and search recipes.",
    add_completion=False,
)
console = Console()


def _recipe_table(title: str, recipes) -> Table:
    table = Table(title=title)
    table.add_column("Title", style="bold")
    table.add_column("Time")
    table.add_column("Cuisine")
    table.add_column("Rating", justify="right")
    table.add_column("Curated", justify="center")
    for recipe in recipes:
        table.add_row(
            recipe.title,
            recipe.duration_text,
            recipe.cuisine_text,
            recipe.rating_text,
            "★" if recipe.is_curated else "",
        )
    return table


async def _explore_service():
    from salt.catalog import CatalogQueries, CuratedRecipeCatalog, ExploreService
    from salt.config import settings
    from salt.db.client import get_client

    client = await get_client()
    curated = CuratedRecipeCatalog(settings.curated_recipes_path).load()
    return ExploreService(CatalogQueries(client), curated)


@app.command("import")
def import_recipe(
    url: str = typer.Argument(..., help="Recipe page or social-media post URL"),
) -> None:
    """Import a recipe from a URL and print it."""
    from salt.config import configure_logging
    from salt.recipe_import import RecipeImporter, RecipeImportSession

    configure_logging()
    session = RecipeImportSession(RecipeImporter())

    with Live(Spinner("dots", text="Importing..."), console=console, transient=True):
        recipe = asyncio.run(session.run(url))

    if recipe is None:
        console.print(f"\n[red]❌ {session.error_message}[/red]")
        raise typer.Exit(1)

    details = [f"[dim]{recipe.source_name or recipe.source_url}[/dim]"]
    if recipe.description:
        details.append(recipe.description)
    details.append(f"\n⏱  {recipe.total_minutes or 'N/A'} min   🍽  {recipe.servings}")
    details.append("\n[bold]Ingredients[/bold]")
    details.extend(f"  • {item}" for item in recipe.ingredients)
    details.append("\n[bold]Instructions[/bold]")
    details.extend(f"  {i}. {step}" for i, step in enumerate(recipe.instructions, 1))

    console.print(Panel("\n".join(details), title=recipe.title, border_style="green"))


@app.command()
def search(
    query: str = typer.Argument(..., help="Title text to search for"),
) -> None:
    """Search curated and server recipes by title."""
    from salt.config import configure_logging

    configure_logging()

    async def run():
        explore = await _explore_service()
        await explore.search(query)
        return explore

    with Live(Spinner("dots", text="Searching..."), console=console, transient=True):
        explore = asyncio.run(run())

    if explore.error_message:
        console.print(f"\n[red]❌ {explore.error_message}[/red]")
        raise typer.Exit(1)

    console.print(_recipe_table(f"Results for '{query}'", explore.search_results))
    console.print(f"[dim]{len(explore.search_results)} of {explore.total_results_count} results[/dim]")


@app.command()
def sections() -> None:
    """Show explore shelves (curated first, then server recipes)."""
    from salt.config import configure_logging

    configure_logging()

    async def run():
        explore = await _explore_service()
        await explore.load_initial_data()
        return explore

    with Live(Spinner("dots", text="Loading..."), console=console, transient=True):
        explore = asyncio.run(run())

    for section in explore.sections:
        console.print(_recipe_table(section.cuisine, section.recipes))


@app.command()
def suggest(
    query: str = typer.Argument(..., help="Partial recipe title"),
) -> None:
    """Autocomplete recipe titles."""
    from salt.config import configure_logging

    configure_logging()

    async def run():
        explore = await _explore_service()
        return await explore.suggest_titles(query)

    suggestions = asyncio.run(run())
    if not suggestions:
        console.print("[dim]No suggestions.[/dim]")
        return
    for title in suggestions:
        console.print(f"  • {title}")


@app.command()
def health() -> None:
    """Check system health and configuration."""
    from salt.catalog import CuratedRecipeCatalog
    from salt.config import get_settings

    console.print("\n[bold]Salt Health Check[/bold]\n")

    try:
        settings = get_settings()
        console.print("✅ Configuration loaded")
        console.print(f"   Environment: {settings.salt_env}")
        console.print(f"   Log level: {settings.log_level}")

        if settings.supabase_url.startswith("https://"):
            console.print("✅ Supabase URL configured")
        else:
            console.print("❌ Supabase URL missing or invalid")

        curated = CuratedRecipeCatalog(settings.curated_recipes_path).load()
        if curated.is_loaded:
            console.print(f"✅ Curated recipes loaded ({len(curated.recipes)})")
        else:
            console.print("⚠️  Curated recipes dataset missing or unreadable")

        console.print(f"ℹ️  Social import API: {settings.social_import_api_url}")
        console.print("\n[green]All checks passed![/green]")

    except Exception as e:
        console.print(f"\n[red]❌ Configuration error: {e}[/red]")
        console.print("[dim]Make sure you have a .env file with required variables.[/dim]")
        raise typer.Exit(1)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the web API with uvicorn."""
    import uvicorn

    from salt.config import configure_logging

    configure_logging()
    uvicorn.run("salt.web.app:app", host=host, port=port, reload=reload)


@app.command()
def version() -> None:
    """Show version information."""
    from salt import __version__

    console.print(f"Salt version {__version__}")


if __name__ == "__main__":
    app()
