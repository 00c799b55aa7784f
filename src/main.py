"""
Point d'entrée CLI de Suasor.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

import asyncio
from typing import Annotated, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import Settings
from .container import Container
from .core.entities.client import ClientCategory
from .core.errors import SuasorError
from .logging_config import configure_logging

VERSION = "0.1.0"

app = typer.Typer(
    name="suasor",
    help="Agrégateur de bibliothèques média (Plex, Jellyfin, Emby, Subsonic, TMDB)",
)
container = Container()
console = Console()


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration Suasor")
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"API TMDB : {'activée' if config.tmdb_enabled else 'désactivée'}")
    typer.echo(f"Langue TMDB : {config.tmdb_language}")
    typer.echo(f"Cache : {config.cache_dir}")
    typer.echo(
        f"Agrégation : {config.aggregation_max_concurrency} clients en parallèle, "
        f"délai {config.aggregation_timeout_seconds:g}s"
    )
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"Suasor v{VERSION}")


@app.command(name="init-db")
def init_db() -> None:
    """Crée les tables de la base de données."""
    container.database.init()
    typer.echo(f"Base initialisée : {get_config().database_url}")


@app.command()
def clients(
    user: Annotated[int, typer.Option("--user", "-u", help="ID de l'utilisateur")],
    category: Annotated[
        Optional[ClientCategory], typer.Option(help="Filtrer par catégorie")
    ] = None,
) -> None:
    """Liste les clients configurés d'un utilisateur."""
    service = container.client_config_service()
    configs = (
        service.list_by_category(user, category)
        if category
        else service.list_for_user(user)
    )
    if not configs:
        typer.echo(f"Aucun client pour l'utilisateur {user}")
        return

    table = Table(title=f"Clients de l'utilisateur {user}")
    table.add_column("ID", justify="right")
    table.add_column("Nom")
    table.add_column("Type")
    table.add_column("URL")
    table.add_column("Actif")
    table.add_column("Capacités")
    for config in configs:
        table.add_row(
            str(config.id),
            config.name,
            config.client_type.value,
            config.base_url or "-",
            "oui" if config.enabled else "non",
            ", ".join(sorted(c.value for c in config.capabilities)),
        )
    console.print(table)


@app.command(name="test-client")
def test_client(
    client_id: Annotated[int, typer.Argument(help="ID du client")],
    user: Annotated[int, typer.Option("--user", "-u", help="ID de l'utilisateur")],
) -> None:
    """Teste la connexion à un client configuré."""

    async def run() -> bool:
        try:
            return await container.client_config_service().test_connection(user, client_id)
        finally:
            await container.provider_factory().close_all()

    try:
        connected = asyncio.run(run())
    except SuasorError as e:
        console.print(f"[red]Erreur :[/red] {e}")
        raise typer.Exit(code=1)

    if connected:
        console.print(f"[green]Client {client_id} : connexion réussie[/green]")
    else:
        console.print(f"[red]Client {client_id} : connexion impossible[/red]")
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: Annotated[Optional[str], typer.Option(help="Adresse d'écoute")] = None,
    port: Annotated[Optional[int], typer.Option(help="Port d'écoute")] = None,
    reload: Annotated[bool, typer.Option(help="Rechargement automatique")] = False,
) -> None:
    """Lance le serveur web Suasor."""
    import uvicorn

    config = get_config()
    host = host or config.host
    port = port or config.port
    typer.echo(f"Démarrage du serveur sur {host}:{port}")
    uvicorn.run("src.web.app:app", host=host, port=port, reload=reload)


def main() -> None:
    """Point d'entrée de l'application."""
    # Charge la configuration et configure le logging
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    # Initialise la base de données (crée les tables si nécessaire)
    container.database.init()

    logger.info("Démarrage de Suasor", version=VERSION)

    # Lance la CLI
    app()


if __name__ == "__main__":
    main()
