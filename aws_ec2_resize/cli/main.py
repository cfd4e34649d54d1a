"""
Command line runner for the EC2 resize handler.

Runs one handler invocation locally, the way the host automation engine
would, and prints progress and the final result.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from aws_ec2_resize import __version__
from aws_ec2_resize.core.config import ConfigManager
from aws_ec2_resize.core.exceptions import AWSResizeError, ConfigurationError
from aws_ec2_resize.handler.progress import FINAL_SEQUENCE, StatusType
from aws_ec2_resize.handler.runtime import Ec2ResizeHandler, HandlerStartInfo


console = Console()

# Exit codes for different error types
EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_EXECUTION_FAILED = 4
EXIT_USER_CANCELLED = 130

STATUS_STYLES = {
    StatusType.INITIALIZING: "cyan",
    StatusType.RUNNING: "blue",
    StatusType.COMPLETE: "green",
    StatusType.FAILED: "red",
}


def print_progress(context: str, message: str, status: StatusType, sequence: int) -> None:
    style = STATUS_STYLES.get(status, "white")
    seq = "final" if sequence == FINAL_SEQUENCE else str(sequence)
    console.print(
        f"[dim]{seq:>5}[/dim] [{style}]{status.value:<12}[/{style}] {escape(context)}: {escape(message)}"
    )


def write_sample_config(config_manager: ConfigManager) -> None:
    """Write the sample handler configuration, refusing to overwrite an existing one."""
    config_path = config_manager.get_config_path()
    if config_manager.config_exists():
        raise ConfigurationError(f"Configuration already exists at {config_path}.")

    config_manager.save_config(Ec2ResizeHandler.get_config_instance())
    console.print(f"✅ [green]Sample configuration written to[/green] {escape(str(config_path))}")
    console.print("[dim]Edit AwsEnvironmentProfile to map your environments to credential profiles.[/dim]")


@click.command()
@click.argument(
    "request_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Handler configuration file (defaults to ~/.aws-ec2-resize/config.json)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Validate and inspect instances without changing them",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    help="Number of instances resized concurrently",
)
@click.option(
    "--init",
    "init_config",
    is_flag=True,
    help="Write a sample configuration to the config path and exit",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show debug logging",
)
@click.version_option(version=__version__)
def main(
    request_file: Optional[Path] = None,
    config_path: Optional[Path] = None,
    dry_run: bool = False,
    workers: Optional[int] = None,
    verbose: bool = False,
    init_config: bool = False,
) -> None:
    """
    Resize EC2 instances described in REQUEST_FILE.

    REQUEST_FILE holds one resize detail, a list of them, or a mapping with
    a Details list, in JSON or YAML. Use --init to write a sample
    configuration first.
    """
    if request_file is None and not init_config:
        raise click.UsageError("Missing argument 'REQUEST_FILE'.")

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        )

    try:
        config_manager = ConfigManager(config_path)
        if init_config:
            write_sample_config(config_manager)
            return

        if not config_manager.config_exists():
            raise ConfigurationError(
                f"No configuration found at {config_manager.get_config_path()}."
            )
        config = config_manager.load_config()
        if workers is not None:
            config = config.model_copy(update={"max_workers": workers})

        handler = Ec2ResizeHandler().initialize(config)
        start_info = HandlerStartInfo(
            parameters=request_file.read_text(),
            is_dry_run=dry_run,
        )
        result = handler.execute(start_info, on_progress=print_progress)

        console.print()
        console.print(Panel(Text(result.exit_data or ""), title=f"Result: {result.status.value}"))

        if result.status == StatusType.FAILED:
            sys.exit(EXIT_EXECUTION_FAILED)

    except KeyboardInterrupt:
        console.print("\n⚠️  [yellow]Operation cancelled by user[/yellow]")
        sys.exit(EXIT_USER_CANCELLED)
    except ConfigurationError as e:
        console.print(f"❌ [red]Configuration error: {escape(str(e))}[/red]")
        sys.exit(EXIT_CONFIG_ERROR)
    except AWSResizeError as e:
        console.print(f"❌ [red]{escape(str(e))}[/red]")
        sys.exit(EXIT_GENERAL_ERROR)
    except Exception as e:
        console.print(f"💥 [red]Unexpected error: {escape(str(e))}[/red]")
        console.print("[dim]Please report this issue with the full error message.[/dim]")
        sys.exit(EXIT_GENERAL_ERROR)


if __name__ == "__main__":
    main()
