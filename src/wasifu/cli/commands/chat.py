"""Chat command for interactive sessions."""

import asyncio
from pathlib import Path

import typer

app = typer.Typer(help="Start an interactive intake session")


@app.callback(invoke_without_command=True)
def run_chat(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to wasifu.yaml or config directory"
    ),
    user_id: str | None = typer.Option(None, "--user", "-u", help="Conversation id"),
    debug: bool = typer.Option(False, "--debug", help="Debug mode"),
    ctx: typer.Context = typer.Option(None, hidden=True),
) -> None:
    """Start interactive chat session."""
    if ctx and ctx.invoked_subcommand:
        return

    from wasifu.cli.chat_runner import ChatConfig, run_chat_session

    chat_config = ChatConfig(config_path=config, thread_id=user_id, debug=debug)

    try:
        asyncio.run(run_chat_session(chat_config))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        typer.echo(f"Fatal error: {e}", err=True)
        raise typer.Exit(1)
