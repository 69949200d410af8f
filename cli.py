#!/usr/bin/env python3
"""CLI client for the Phish Agent analysis pipeline."""

import asyncio
import json

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from phish_agent import load_config, create_agent, configure_logging, EmailData
from phish_agent.analyzer.errors import ConfigurationError, InvalidEmailError

console = Console()


def show_result(result, title="Analysis Result"):
    """Print a verdict panel."""
    if result.is_phishing:
        header = f"[bold red]⚠ Phishing suspected[/] ({result.confidence}% confidence)"
    else:
        header = f"[bold green]✓ Looks safe[/] ({result.confidence}% confidence)"

    lines = [header, "", result.recommendation]
    if result.indicators:
        lines.append("")
        lines.append("[bold]Indicators:[/]")
        lines.extend(f"  • {indicator}" for indicator in result.indicators)

    console.print(Panel.fit("\n".join(lines), title=title))


@click.group()
@click.option("--config", "-c", default="config.yaml", help="Path to config file")
@click.pass_context
def cli(ctx, config):
    """Phish Agent - Phishing analysis for webmail messages."""
    ctx.ensure_object(dict)
    app_config = load_config(config)
    configure_logging(app_config.log_level)
    ctx.obj["agent"] = create_agent(app_config)


@cli.command()
@click.argument("email_file", type=click.File("r"))
@click.pass_context
def scan(ctx, email_file):
    """Analyze an email given as JSON ({from, subject, body, links, emailId})."""
    agent = ctx.obj["agent"]
    session = agent.session()
    session.open()

    try:
        email = EmailData.from_dict(json.load(email_file))
    except (ValueError, InvalidEmailError) as e:
        console.print(f"[red]Error:[/] {e}")
        return

    async def run():
        result = await session.scan(email)
        await agent.channel.drain()
        return result

    with console.status("Analyzing email..."):
        outcome = asyncio.run(run())

    if outcome.ok:
        show_result(outcome.result)
    elif outcome.status == "timed_out":
        console.print(f"[yellow]{outcome.error}[/]")
    else:
        console.print(f"[red]Error:[/] {outcome.error}")


@cli.command()
@click.pass_context
def latest(ctx):
    """Show the most recent stored analysis."""
    record = ctx.obj["agent"].session().open()
    if record is None:
        console.print("[dim]No stored analyses.[/]")
        return

    summary = record.email_summary
    show_result(record.result, title=f"{summary.get('subject', '')[:40]} | {summary.get('from', '')}")


@cli.command()
@click.pass_context
def history(ctx):
    """List stored analyses, newest first."""
    agent = ctx.obj["agent"]

    table = Table(title="Stored Analyses")
    table.add_column("Key", style="dim")
    table.add_column("From", style="cyan", max_width=30)
    table.add_column("Subject", style="white", max_width=40)
    table.add_column("Verdict", style="green")
    table.add_column("Model", style="yellow")

    for key, record in agent.results.items():
        verdict = f"{'phishing' if record.result.is_phishing else 'safe'} ({record.result.confidence}%)"
        table.add_row(
            key,
            record.email_summary.get("from", "")[:30],
            record.email_summary.get("subject", "")[:40],
            verdict,
            record.settings_snapshot.get("model", "-"),
        )

    console.print(table)


@cli.command()
@click.option("--limit", "-n", default=None, type=int, help="Results to keep")
@click.pass_context
def cleanup(ctx, limit):
    """Remove old stored analyses."""
    agent = ctx.obj["agent"]
    removed = agent.results.evict_excess(limit if limit is not None else agent.config.retention_limit)
    console.print(f"Removed [bold]{len(removed)}[/] old result(s)")


@cli.command()
@click.pass_context
def stats(ctx):
    """Show statistics from the current audit log session."""
    agent = ctx.obj["agent"]
    if agent.audit_logger is None:
        console.print("[yellow]Audit log disabled.[/] Set PHISH_AGENT_AUDIT_DIR or logging.audit_dir")
        return

    data = agent.audit_logger.get_stats()
    console.print(Panel.fit(
        f"Total: {data['total']} | Phishing: {data['phishing']}\n"
        f"By outcome: {data['by_outcome']}\n"
        f"Fallback causes: {data['by_cause']}\n"
        f"Average confidence: {data['avg_confidence']}%",
        title="Audit Stats"
    ))


@cli.group()
def settings():
    """View or change analysis settings."""


@settings.command("show")
@click.pass_context
def settings_show(ctx):
    """Show the active settings."""
    current = ctx.obj["agent"].settings.resolve()
    console.print("\n[bold]Analysis Settings:[/]")
    console.print(f"  API Key: {'[green]SET[/]' if current.has_api_key else '[yellow]NOT SET (local scan only)[/]'}")
    console.print(f"  Endpoint: {current.endpoint}")
    console.print(f"  Model: {current.model}")
    console.print(f"  Threshold: {current.threshold}%")


@settings.command("save")
@click.option("--api-key", prompt=True, hide_input=True, help="OpenRouter API key (sk-or-...)")
@click.option("--endpoint", default="", help="Chat completions endpoint")
@click.option("--model", default="", help="Model identifier")
@click.option("--threshold", default=70, help="Decision threshold (1-100)")
@click.pass_context
def settings_save(ctx, api_key, endpoint, model, threshold):
    """Save the API key and analysis options."""
    try:
        saved = ctx.obj["agent"].settings.save(api_key, endpoint, model, threshold)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/] {e}")
        return
    console.print(f"[green]✓ Settings saved successfully[/] (model {saved.model}, threshold {saved.threshold}%)")


@settings.command("clear-key")
@click.pass_context
def settings_clear_key(ctx):
    """Forget the stored API key."""
    ctx.obj["agent"].settings.clear_api_key()
    console.print("API key cleared")


if __name__ == "__main__":
    cli()
