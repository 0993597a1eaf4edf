"""Windows service host for commands registered by svcinstall.

The batch wrapper written by the Windows backend starts this module as:

    python -m svcinstall.service.winhost --name NAME -- COMMAND...

It connects to the service control manager under NAME, runs COMMAND in a
child process, stops it when the SCM asks, and ends when the command exits.
"""

import logging
import subprocess
import sys
from typing import Annotated

import typer

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 1000

app = typer.Typer(
    name="svcinstall-winhost",
    help="Host a command as a Windows service",
    add_completion=False,
)


def build_service_class(name: str, command: str) -> type:
    """Create a pywin32 service class bound to one service name and command."""
    import win32event
    import win32service
    import win32serviceutil

    class CommandService(win32serviceutil.ServiceFramework):
        _svc_name_ = name
        _svc_display_name_ = name

        def __init__(self, args):
            win32serviceutil.ServiceFramework.__init__(self, args)
            self._stop_event = win32event.CreateEvent(None, 0, 0, None)
            self._process: subprocess.Popen | None = None

        def SvcStop(self):
            self.ReportServiceStatus(win32service.SERVICE_STOP_PENDING)
            if self._process and self._process.poll() is None:
                self._process.terminate()
            win32event.SetEvent(self._stop_event)

        def SvcDoRun(self):
            self.ReportServiceStatus(win32service.SERVICE_RUNNING)
            self._process = subprocess.Popen(command, shell=True)
            while self._process.poll() is None:
                rc = win32event.WaitForSingleObject(self._stop_event, POLL_INTERVAL_MS)
                if rc == win32event.WAIT_OBJECT_0:
                    break
            logger.info("Service %s finished", name)

    return CommandService


def host(name: str, command: str) -> None:
    """Hand control to the SCM dispatcher. Blocks until the service stops."""
    import servicemanager

    service_class = build_service_class(name, command)
    servicemanager.Initialize()
    servicemanager.PrepareToHostSingle(service_class)
    servicemanager.StartServiceCtrlDispatcher()


@app.command()
def main(
    name: Annotated[
        str,
        typer.Option("--name", "-n", help="Service name registered with the SCM"),
    ],
    command: Annotated[
        list[str],
        typer.Argument(help="Command to run, given after '--'"),
    ],
) -> None:
    """Run COMMAND as the Windows service NAME."""
    if sys.platform != "win32":
        typer.echo("The service host can only be used on Windows.", err=True)
        raise typer.Exit(1)
    host(name, " ".join(command))


if __name__ == "__main__":
    app()
