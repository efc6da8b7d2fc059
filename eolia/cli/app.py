"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Optional, Annotated

import pendulum
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.panel import Panel

from ..config import AppConfig, get_default_config_path
from ..domain.booking import BookingRequest, format_phone_number
from ..domain.exceptions import EoliaError
from ..domain.models import WEEKDAYS, WEEKDAY_LABELS_FR, parse_hhmm
from ..domain.slot_generator import SlotGenerator
from ..adapters.mock_client import MockClient
from ..adapters.supabase_client import SupabaseClient
from ..services.booking_service import BookingService

app = typer.Typer(
    name="eolia",
    help="Créneaux disponibles et réservation en ligne pour praticiens",
    add_completion=False
)

console = Console()

logger = logging.getLogger(__name__)

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
MockOption = Annotated[bool, typer.Option("--mock", help="Utiliser les données de démonstration au lieu de la base hébergée.")]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Afficher les logs de debug.")] = False,
):
    """
    Eolia - gestion des créneaux de rendez-vous.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _load_config(config_file: Optional[Path], mock: bool) -> AppConfig:
    """
    Load the configuration file.

    In mock mode a missing file falls back to the defaults.
    """
    config_path = config_file or get_default_config_path()

    if mock and not config_path.exists():
        logger.debug("No config file at %s, using defaults in mock mode", config_path)
        return AppConfig()

    return AppConfig.load_from_yaml(config_path)


def _build_repository(config: AppConfig, mock: bool):
    if mock:
        return MockClient(timezone=config.timezone)

    if config.supabase is None:
        raise EoliaError(
            "Aucune connexion Supabase configurée (section 'supabase' du config.yaml). "
            "Utilisez --mock pour les données de démonstration."
        )

    return SupabaseClient(
        url=config.supabase.url,
        api_key=config.supabase.api_key,
        timezone=config.timezone,
        timeout=config.supabase.timeout_seconds,
    )


def _build_service(config: AppConfig, mock: bool) -> BookingService:
    return BookingService(
        repository=_build_repository(config, mock),
        slot_generator=SlotGenerator(timezone=config.timezone),
        motifs=config.get_motifs(),
    )


def _parse_date(value: Optional[str], tz: str):
    if not value:
        return pendulum.now(tz).date()

    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Erreur de format de date (YYYY-MM-DD attendu): {e}[/red]")
        raise typer.Exit(1)


@app.command()
def slots(
    username: Annotated[str, typer.Argument(help="Identifiant public du praticien (page de réservation).")],
    date: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD). Par défaut : aujourd'hui.")] = None,
    motif: Annotated[Optional[str], typer.Option("--motif", "-m", help="Motif de consultation (détermine la durée).")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", help="Durée en minutes (remplace celle du motif).")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    List the bookable slots of a practitioner for one day.

    Examples:

        eolia slots claire-martin --date 2030-01-07
        eolia slots claire-martin --motif Suivi --mock
    """
    try:
        config = _load_config(config_file, mock)
        service = _build_service(config, mock)
        day = _parse_date(date, config.timezone)

        if duration is not None:
            duration_minutes = duration
            label = f"{duration} min"
        else:
            selected = service.find_motif(motif) if motif else service.motifs[0]
            duration_minutes = selected.duration_minutes
            label = f"{selected.label} ({selected.duration_minutes} min)"

        if mock:
            console.print("[yellow]⚠  MODE DÉMO : données fictives[/yellow]\n")

        found = service.available_slots(
            username=username,
            day=day,
            duration_minutes=duration_minutes,
        )

        console.print(f"[bold cyan]Créneaux pour {username}[/bold cyan] - {day.format('DD/MM/YYYY')} - {label}\n")

        if not found:
            console.print(
                "[yellow]Aucun créneau disponible ce jour.[/yellow]\n"
                "Essayez une autre date."
            )
        else:
            console.print(f"[bold green]✓ {len(found)} créneau(x) disponible(s) :[/bold green]\n")
            for slot in found:
                console.print(f"  {slot.format_display()}")

        console.print()

    except FileNotFoundError as e:
        console.print(f"[bold red]Erreur :[/bold red] {e}")
        raise typer.Exit(1)

    except (EoliaError, ValueError) as e:
        console.print(f"[bold red]Erreur :[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def dates(
    username: Annotated[str, typer.Argument(help="Identifiant public du praticien.")],
    start: Annotated[Optional[str], typer.Option("--start", help="Première date (YYYY-MM-DD). Par défaut : aujourd'hui.")] = None,
    days: Annotated[Optional[int], typer.Option("--days", help="Nombre de jours à parcourir.")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    List the dates open for booking.
    """
    try:
        config = _load_config(config_file, mock)
        service = _build_service(config, mock)
        first = _parse_date(start, config.timezone)

        open_dates = service.bookable_dates(
            username=username,
            start=first,
            days=days if days is not None else config.booking_horizon_days,
        )

        if not open_dates:
            console.print("[yellow]Aucune date ouverte à la réservation sur cette période.[/yellow]")
            return

        for day in open_dates:
            console.print(f"  {WEEKDAY_LABELS_FR[day.weekday()]} {day.format('DD/MM/YYYY')}")

    except (FileNotFoundError, EoliaError, ValueError) as e:
        console.print(f"[bold red]Erreur :[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def book(
    username: Annotated[str, typer.Argument(help="Identifiant public du praticien.")],
    date: Annotated[str, typer.Option("--date", "-d", help="Date (YYYY-MM-DD)")],
    time: Annotated[str, typer.Option("--time", "-t", help="Heure du créneau (HH:mm)")],
    first_name: Annotated[str, typer.Option("--first-name", help="Prénom")],
    last_name: Annotated[str, typer.Option("--last-name", help="Nom")],
    email: Annotated[str, typer.Option("--email", help="Email")],
    phone: Annotated[str, typer.Option("--phone", help="Téléphone (ex: 06 12 34 56 78)")],
    motif: Annotated[Optional[str], typer.Option("--motif", "-m", help="Motif de consultation")] = None,
    consent: Annotated[bool, typer.Option("--consent", help="J'accepte le traitement de mes données (RGPD).")] = False,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Book a slot for a patient.
    """
    try:
        config = _load_config(config_file, mock)
        service = _build_service(config, mock)
        day = _parse_date(date, config.timezone)
        wall_time = parse_hhmm(time)

        request = BookingRequest(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            motif=motif or service.motifs[0].label,
            gdpr_consent=consent,
        )

        start = pendulum.datetime(
            day.year, day.month, day.day, wall_time.hour, wall_time.minute, tz=config.timezone
        )

        if mock:
            console.print("[yellow]⚠  MODE DÉMO : la réservation n'est pas enregistrée[/yellow]\n")

        appointment = service.book(username=username, start=start, request=request)

        console.print(Panel.fit(
            f"[bold green]✓ Rendez-vous confirmé ![/bold green]\n\n"
            f"[bold]Date :[/bold] {WEEKDAY_LABELS_FR[appointment.start.weekday()]} "
            f"{appointment.start.format('DD/MM/YYYY')} à {appointment.start.format('HH:mm')}\n"
            f"[bold]Motif :[/bold] {appointment.motif}\n"
            f"[bold]Téléphone :[/bold] {format_phone_number(request.phone)}",
            title="Réservation"
        ))

    except ValidationError as e:
        console.print("[bold red]Données invalides :[/bold red]")
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            console.print(f"  {field}: {error['msg']}")
        raise typer.Exit(1)

    except (FileNotFoundError, EoliaError, ValueError) as e:
        console.print(f"[bold red]Erreur :[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def hours(
    username: Annotated[str, typer.Argument(help="Identifiant public du praticien.")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Show the weekly working hours of a practitioner.
    """
    try:
        config = _load_config(config_file, mock)
        repository = _build_repository(config, mock)
        practitioner = repository.get_practitioner(username)

        table = Table(
            title=f"Horaires de {practitioner.name or username}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Jour", style="bold yellow")
        table.add_column("Horaires")

        for index, day_name in enumerate(WEEKDAYS):
            schedule = practitioner.working_hours.days.get(day_name)
            if schedule is None or not schedule.enabled or not schedule.slots:
                text = "[dim]Fermé[/dim]"
            else:
                text = ", ".join(str(interval) for interval in schedule.slots)
            table.add_row(WEEKDAY_LABELS_FR[index], text)

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, EoliaError, ValueError) as e:
        console.print(f"[bold red]Erreur :[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def motifs(
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    List the configured appointment types.
    """
    try:
        config = _load_config(config_file, mock)

        table = Table(
            title="Motifs de consultation",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Motif", style="bold yellow")
        table.add_column("Durée", justify="right")

        for item in config.get_motifs():
            table.add_row(item.label, f"{item.duration_minutes} min")

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Erreur :[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]eolia[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
