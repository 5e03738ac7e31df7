"""regcheck CLI — scan a registry's repositories for malformed manifests."""

import click
from rich.console import Console

from regcheck import __version__
from regcheck.errors import SetupError

console = Console()
err_console = Console(stderr=True)


@click.command()
@click.version_option(version=__version__)
@click.option("-config", "--config", "config_path", default=None, help="Path to a registry config file")
@click.option("-repos", "--repos", "repos_path", default=None, help="File with a list of repos, one per line")
@click.option("-q", "--quiet", is_flag=True, help="Only print findings and errors")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, repos_path: str | None, quiet: bool):
    """Check every manifest in a registry for layer and history consistency.

    Repositories are listed from the registry storage unless -repos names a
    file. Findings go to stdout; progress and per-repository errors go to
    stderr.
    """
    from regcheck.config import build_namespace, load_config
    from regcheck.scanner.coordinator import DEFAULT_WORKERS, ScanCoordinator
    from regcheck.scanner.repo_list import MAX_REPOSITORIES, resolve_repositories
    from regcheck.scanner.reporter import Reporter

    if not config_path:
        err_console.print("must supply a config file with -config", markup=False)
        err_console.print(ctx.get_usage(), markup=False, highlight=False)
        return

    try:
        config = load_config(config_path)
        namespace = build_namespace(config)
        repos = resolve_repositories(namespace, repos_path, limit=MAX_REPOSITORIES)
    except SetupError as e:
        err_console.print(f"error: {e}", markup=False, highlight=False)
        ctx.exit(1)

    reporter = Reporter(console=console, err_console=err_console, quiet=quiet)
    coordinator = ScanCoordinator(namespace, reporter, workers=DEFAULT_WORKERS)
    summary = coordinator.scan(repos)

    reporter.progress(summary.summary())


if __name__ == "__main__":
    main()
