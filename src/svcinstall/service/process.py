"""Native command execution."""

import asyncio
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Shell convention for "command not found"
NOT_FOUND_RETURNCODE = 127


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a native command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def diagnostics(self) -> str:
        """Captured error text, falling back to stdout when stderr is empty."""
        return self.stderr.strip() or self.stdout.strip()

    @property
    def command_line(self) -> str:
        return " ".join(self.args)


async def run_command(*args: str) -> CommandResult:
    """Run a native command and capture its output.

    No timeout is applied; native tools are trusted to terminate.

    Args:
        *args: Program followed by its arguments.

    Returns:
        CommandResult. A missing program yields return code 127 with the
        OS error as stderr instead of raising.
    """
    logger.debug("Running: %s", " ".join(args))
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        logger.debug("Command not found: %s", args[0])
        return CommandResult(args=args, returncode=NOT_FOUND_RETURNCODE, stderr=str(e))

    stdout, stderr = await proc.communicate()
    result = CommandResult(
        args=args,
        returncode=proc.returncode or 0,
        stdout=stdout.decode(errors="replace"),
        stderr=stderr.decode(errors="replace"),
    )
    if not result.ok:
        logger.debug("%s exited with %d", args[0], result.returncode)
    return result
