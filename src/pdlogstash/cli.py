"""CLI entry point using Typer."""

import structlog
import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="pdlogstash",
    help="PagerDuty-to-Logstash - Forward enriched PagerDuty log entries over UDP.",
)
console = Console()

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
)


def _stats_table(stats: dict) -> Table:
    table = Table(title="Forwarding Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Since", str(stats.get("since", "")))
    table.add_row("Until", str(stats.get("until", "")))
    table.add_row("Pages", str(stats.get("pages", 0)))
    table.add_row("Fetched", str(stats.get("fetched", 0)))
    table.add_row("Sent", str(stats.get("sent", 0)))
    table.add_row("Dropped (too large)", str(stats.get("dropped", 0)))
    return table


@app.callback()
def main() -> None:
    """PagerDuty-to-Logstash."""


@app.command()
def run(
    pd_key: str | None = typer.Option(None, "--pd-key", help="PagerDuty REST API key (v2)"),
    from_: str | None = typer.Option(None, "--from", help="Start time (RFC 3339), defaults to one hour ago"),
    until: str | None = typer.Option(None, "--until", help="End time (RFC 3339), defaults to now"),
    remote_addr: str | None = typer.Option(None, "--remote-addr", help="Logstash host"),
    remote_port: int | None = typer.Option(None, "--remote-port", help="Logstash UDP port"),
    page_size: int | None = typer.Option(None, "--page-size", min=1, help="Log entries per API request"),
    send_delay: float | None = typer.Option(None, "--send-delay", min=0.0, help="Seconds to pause between datagrams"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print enriched entries instead of sending them"),
) -> None:
    """Fetch log entries for a time range and forward them to Logstash."""
    from pdlogstash.config import settings
    from pdlogstash.jobs.forward import default_time_range, run_forward
    from pdlogstash.outbound.udp_sender import ConsoleTransmitter, UdpTransmitter
    from pdlogstash.pagerduty.client import TimeRange

    api_key = pd_key or (settings.pagerduty_api_key.get_secret_value() if settings.pagerduty_api_key else None)
    if not api_key:
        console.print("[bold red]Error:[/bold red] a PagerDuty API key is required (--pd-key or PAGERDUTY_API_KEY)")
        raise typer.Exit(1)

    defaults = default_time_range()
    window = TimeRange(since=from_ or defaults.since, until=until or defaults.until)

    host = remote_addr or settings.logstash_host
    port = remote_port or settings.logstash_port

    if dry_run:
        console.print("[bold blue]Running in dry-run mode (nothing will be sent)...[/bold blue]")
        transmitter = ConsoleTransmitter(console)
    else:
        console.print(f"[bold blue]Forwarding log entries to {host}:{port}...[/bold blue]")
        transmitter = UdpTransmitter(host, port)

    try:
        with transmitter:
            stats = run_forward(
                window,
                api_key=api_key,
                transmitter=transmitter,
                page_size=page_size,
                send_delay_seconds=send_delay,
            )
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(_stats_table(stats))
    if stats.get("dropped"):
        console.print("[bold yellow]Completed with dropped entries.[/bold yellow]")
    else:
        console.print("[bold green]Done![/bold green]")


if __name__ == "__main__":
    app()
