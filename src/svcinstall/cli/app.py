"""Main CLI application."""

import asyncio
import os
from collections.abc import Coroutine
from typing import Annotated, Any

import typer

from svcinstall import __version__
from svcinstall.cli.console import console, error, print_result
from svcinstall.errors import ServiceError
from svcinstall.logging import configure_logging
from svcinstall.service import ServiceInstaller, ServiceResult, create_default_registry
from svcinstall.service.detect import detect_init_system

app = typer.Typer(
    name="svcinstall",
    help="Install any command as an OS-native background service",
    no_args_is_help=True,
)

SystemOption = Annotated[
    bool,
    typer.Option(
        "--system",
        "-s",
        help="Install the service system-wide (requires root, if applicable)",
    ),
]
NameOption = Annotated[str | None, typer.Option("--name", "-n", help="Set service name")]
CmdOption = Annotated[
    str | None, typer.Option("--cmd", "-c", help="Command to be run by the service")
]
CwdOption = Annotated[
    str | None, typer.Option("--cwd", "-w", help="Set working directory for service")
]
UserOption = Annotated[
    str | None,
    typer.Option("--user", "-u", help="Set service run-as user (if applicable)"),
]
HomeOption = Annotated[
    str | None,
    typer.Option("--home", "-H", help="Set service home directory (if applicable)"),
]
ForceOption = Annotated[
    str | None,
    typer.Option(
        "--force",
        "-f",
        help="Generate configuration for a specific service manager",
    ),
]
PathOption = Annotated[
    list[str] | None,
    typer.Option(
        "--path",
        "-p",
        help=f"Extra PATH directories, repeatable or '{os.pathsep}'-separated",
    ),
]
EnvOption = Annotated[
    list[str] | None,
    typer.Option("--env", "-e", help="Extra environment variable as NAME=VALUE"),
]
CommandArgument = Annotated[
    list[str] | None,
    typer.Argument(help="Command to run, given after '--' when --cmd is not used"),
]


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"svcinstall {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging with rich output")
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """Install any command as an OS-native background service."""
    configure_logging("DEBUG" if verbose else None, use_rich=verbose)
    ctx.obj = ServiceInstaller(create_default_registry(), detector=detect_init_system)


def _split_paths(paths: list[str] | None) -> list[str]:
    return [entry for value in paths or [] for entry in value.split(os.pathsep) if entry]


def _run(
    action: Coroutine[Any, Any, ServiceResult], failure_prefix: str
) -> ServiceResult:
    """Run an installer coroutine, turning service errors into exit code 1."""
    try:
        return asyncio.run(action)
    except ServiceError as e:
        error(f"{failure_prefix}, error: {e}")
        raise typer.Exit(1) from None


def _install(
    installer: ServiceInstaller,
    *,
    only_generate: bool,
    system: bool,
    name: str | None,
    cmd: str | None,
    cwd: str | None,
    user: str | None,
    home: str | None,
    force: str | None,
    path: list[str] | None,
    env: list[str] | None,
    command: list[str] | None,
) -> None:
    options = {
        "system": system,
        "name": name,
        "cmd": cmd or " ".join(command or []),
        "cwd": cwd,
        "user": user,
        "home": home,
        "path": _split_paths(path),
        "env": env or [],
    }
    result = _run(
        installer.install_service(options, only_generate, force),
        "Could not install service",
    )
    print_result(result)


@app.command()
def install(
    ctx: typer.Context,
    system: SystemOption = False,
    name: NameOption = None,
    cmd: CmdOption = None,
    cwd: CwdOption = None,
    user: UserOption = None,
    home: HomeOption = None,
    force: ForceOption = None,
    path: PathOption = None,
    env: EnvOption = None,
    command: CommandArgument = None,
) -> None:
    """Install service.

    Examples:
        svcinstall install --name web --cmd "python -m http.server 8080"
        svcinstall install --name web -- python -m http.server 8080
    """
    _install(
        ctx.obj,
        only_generate=False,
        system=system,
        name=name,
        cmd=cmd,
        cwd=cwd,
        user=user,
        home=home,
        force=force,
        path=path,
        env=env,
        command=command,
    )


@app.command()
def generate(
    ctx: typer.Context,
    system: SystemOption = False,
    name: NameOption = None,
    cmd: CmdOption = None,
    cwd: CwdOption = None,
    user: UserOption = None,
    home: HomeOption = None,
    force: ForceOption = None,
    path: PathOption = None,
    env: EnvOption = None,
    command: CommandArgument = None,
) -> None:
    """Generate and output service configuration, do not install."""
    _install(
        ctx.obj,
        only_generate=True,
        system=system,
        name=name,
        cmd=cmd,
        cwd=cwd,
        user=user,
        home=home,
        force=force,
        path=path,
        env=env,
        command=command,
    )


@app.command()
def uninstall(
    ctx: typer.Context,
    system: SystemOption = False,
    name: NameOption = None,
    home: HomeOption = None,
    force: ForceOption = None,
) -> None:
    """Uninstall service."""
    installer: ServiceInstaller = ctx.obj
    options = {"system": system, "name": name, "home": home}
    result = _run(
        installer.uninstall_service(options, force),
        "Could not uninstall service",
    )
    print_result(result)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
