"""
Edition command handlers.

Each handler validates its command and then applies it through an
EditionStore inside the caller's session.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from bookbrainz_data.db.commands import (
    BaseCommand,
    CreateEditionCommand,
    UpdateEditionCommand,
)
from bookbrainz_data.db.editions import Edition, EditionStore
from bookbrainz_data.observability.logging import get_logger
from bookbrainz_data.observability.tracing import create_span


logger = get_logger(__name__)


class CommandHandler:
    """
    Base command handler with common functionality.

    Subclasses implement handle() for specific command types.
    """

    def __init__(self, store: EditionStore):
        """
        Initialize command handler.

        Args:
            store: Edition store the commands are applied to
        """
        self.store = store

    async def execute(self, session: AsyncSession, command: BaseCommand) -> Edition:
        """
        Validate and apply a command.

        Args:
            session: Open session; committed or rolled back by its owner
            command: Command to execute

        Returns:
            The Edition as written

        Raises:
            ValueError: If command is invalid
        """
        self.validate(command)

        name = command.__class__.__name__
        with create_span(
            f"command.{name}",
            attributes={
                "command.id": str(command.command_id),
                "command.correlation_id": command.correlation_id,
            },
        ):
            edition = await self.handle(session, command)

        logger.info(
            "Command executed",
            command=name,
            command_id=str(command.command_id),
            bbid=edition.bbid,
            revision_id=edition.revision_id,
        )
        return edition

    def validate(self, command: BaseCommand) -> None:
        """
        Validate command before execution.

        Raises:
            ValueError: If command is invalid
        """
        if not command.command_id:
            raise ValueError("Command must have command_id")
        if command.author_id is None and command.revision_id is None:
            raise ValueError("Command must have author_id or revision_id")

    async def handle(self, session: AsyncSession, command: BaseCommand) -> Edition:
        raise NotImplementedError("Subclasses must implement handle()")


class CreateEditionCommandHandler(CommandHandler):
    """Handler for CreateEditionCommand."""

    async def handle(self, session: AsyncSession, command: CreateEditionCommand) -> Edition:
        return await self.store.create(session, command)


class UpdateEditionCommandHandler(CommandHandler):
    """Handler for UpdateEditionCommand."""

    def validate(self, command: UpdateEditionCommand) -> None:
        super().validate(command)
        if not command.bbid:
            raise ValueError("Update requires the Edition bbid")

    async def handle(self, session: AsyncSession, command: UpdateEditionCommand) -> Edition:
        return await self.store.update(session, command)
