"""Main CLI entry point using Typer."""

from __future__ import annotations

import typer
from rich.console import Console

from kube_inspect import __version__
from kube_inspect.integrations.kubernetes.client import KubernetesClient
from kube_inspect.integrations.kubernetes.config import ClusterConfig, InspectorConfig
from kube_inspect.integrations.kubernetes.exceptions import KubernetesError
from kube_inspect.logging.config import configure_logging, get_logger

app = typer.Typer(
    name="kube-inspect",
    help="Interactive terminal dashboard for live Kubernetes pods.",
    add_completion=False,
)

console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"kube-inspect version {__version__}")
        raise typer.Exit()


def build_config(
    context: str | None,
    namespace: str | None,
    kubeconfig: str | None,
) -> InspectorConfig:
    """Merge environment settings with command-line overrides.

    Command-line options win over ``KUBE_INSPECT_*`` variables.

    Raises:
        ValueError: If a setting is invalid.
    """
    config = InspectorConfig.from_env()
    overrides = {
        key: value
        for key, value in (
            ("context", context),
            ("namespace", namespace),
            ("kubeconfig", kubeconfig),
        )
        if value is not None
    }
    if not overrides:
        return config
    cluster = ClusterConfig.model_validate({**config.cluster.model_dump(), **overrides})
    return config.model_copy(update={"cluster": cluster})


@app.command()
def main(
    context: str | None = typer.Option(
        None,
        "--context",
        "-c",
        help="Kubeconfig context to use.",
    ),
    namespace: str | None = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Only show pods in this namespace.",
    ),
    kubeconfig: str | None = typer.Option(
        None,
        "--kubeconfig",
        help="Path to the kubeconfig file.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging.",
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Browse live pods, their YAML and their logs."""
    configure_logging(verbose=verbose, debug=debug, console=False)
    log = get_logger(__name__)

    try:
        config = build_config(context, namespace, kubeconfig)
    except ValueError as e:
        console.print(f"[red]Error:[/red] invalid configuration: {e}")
        raise typer.Exit(1) from e

    try:
        client = KubernetesClient(config.cluster)
    except KubernetesError as e:
        log.error("client_init_failed", error=str(e))
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    from kube_inspect.tui.apps.kubernetes import KubernetesApp

    with client:
        tui = KubernetesApp(client, config)
        try:
            tui.run()
        finally:
            tui.close_resources()


if __name__ == "__main__":
    app()
