"""Interactive chat runner for Wasifu CLI."""

import uuid
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from pathlib import Path

from langgraph.store.base import BaseStore
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt

from wasifu.config.loader import ConfigLoader
from wasifu.core.message_sink import MessageSink
from wasifu.core.types import OutboundTurn
from wasifu.observability.logging import setup_logging
from wasifu.runtime.loop import IntakeRuntime
from wasifu.runtime.store import SessionStore, open_store


class ConsoleMessageSink(MessageSink):
    """Sink that prints outbound turns to a rich console."""

    def __init__(self, console: Console):
        self.console = console

    async def send(self, conversation_id: str, turn: OutboundTurn) -> None:
        for message in turn.messages:
            self.console.print(f"[bold blue]Bot > [/]{message}")

        if turn.card is not None:
            actions = "\n".join(f"[{a.title}] -> {a.data}" for a in turn.card.actions)
            body = "\n".join(turn.card.body)
            self.console.print(Panel(f"{body}\n\n{actions}", title=turn.card.title or "Card"))

        if turn.prompt:
            self.console.print(f"[bold blue]Bot > [/]{turn.prompt}")
        for number, label in enumerate(turn.choices, start=1):
            self.console.print(f"    [cyan]{number}.[/] {label}")
        self.console.print()


@dataclass
class ChatConfig:
    """Configuration for chat runner."""

    config_path: Path | None = None
    thread_id: str | None = None
    debug: bool = False


class ChatRunner:
    """Interactive chat session runner.

    Encapsulates the setup, execution, and cleanup of an
    interactive session with the intake runtime.
    """

    def __init__(self, config: ChatConfig):
        self.config = config
        self.console = Console()
        self.runtime: IntakeRuntime | None = None
        self.thread_id = config.thread_id or f"cli_{uuid.uuid4().hex[:6]}"
        self._store_cm: AbstractAsyncContextManager[BaseStore] | None = None
        self._running = False

    async def setup(self) -> None:
        """Load config, open the store and start the runtime."""
        from dotenv import load_dotenv

        load_dotenv()

        if self.config.config_path is not None:
            app_config = ConfigLoader.load(self.config.config_path)
        else:
            app_config = ConfigLoader.from_env()

        setup_logging(
            "DEBUG" if self.config.debug else "WARNING",
            app_config.settings.logging.json_file,
        )

        persistence = app_config.settings.persistence
        self._store_cm = open_store(persistence.backend, persistence.path)
        store = await self._store_cm.__aenter__()

        runtime = IntakeRuntime(
            app_config,
            SessionStore(store),
            message_sink=ConsoleMessageSink(self.console),
        )
        try:
            await runtime.__aenter__()
        except Exception:
            # Nothing will call cleanup() for a runner that failed to start
            await self._store_cm.__aexit__(None, None, None)
            self._store_cm = None
            raise
        self.runtime = runtime

    async def start(self) -> None:
        """Start the interactive session."""
        if not self.runtime:
            await self.setup()

        self.console.print(f"Session ID: [green]{self.thread_id}[/]")
        self.console.print("Say anything to begin. Type 'exit' or 'quit' to end session.\n")

        self._running = True
        while self._running:
            try:
                user_input = Prompt.ask("[bold green]You[/]")

                if self._is_exit_command(user_input):
                    self.console.print("\n[yellow]Goodbye![/]")
                    break

                if not user_input.strip():
                    continue

                # Output is printed by ConsoleMessageSink
                if self.runtime is not None:
                    await self.runtime.process_message(user_input, user_id=self.thread_id)

            except KeyboardInterrupt:
                self.console.print("\n[yellow]Goodbye![/]")
                break
            except Exception as e:
                if self.config.debug:
                    self.console.print_exception()
                else:
                    self.console.print(f"[red]Error: {e}[/]")

    def _is_exit_command(self, user_input: str) -> bool:
        return user_input.strip().lower() in ("quit", "exit", "q", "/quit", "/exit")

    async def cleanup(self) -> None:
        """Clean up resources."""
        self._running = False
        if self.runtime is not None:
            await self.runtime.__aexit__(None, None, None)
            self.runtime = None

        if self._store_cm is not None:
            await self._store_cm.__aexit__(None, None, None)
            self._store_cm = None

    async def __aenter__(self) -> "ChatRunner":
        await self.setup()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.cleanup()


async def run_chat_session(config: ChatConfig) -> None:
    """Run an interactive chat session."""
    async with ChatRunner(config) as runner:
        await runner.start()
