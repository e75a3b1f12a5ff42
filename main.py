import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from code_insights.core.config import BitbucketConfig
from code_insights.core.exceptions import InsightsError, ParseError
from code_insights.core.output_formatter import TableErrorFormatter
from code_insights.services.bitbucket_client import BitbucketApiClient
from code_insights.services.error_formatter import BitbucketErrorFormatter
from code_insights.services.phpstan_loader import read_analysis_result
from code_insights.utils.logging_config import setup_logging
from code_insights.utils.path_utils import RelativePathHelper

logger = logging.getLogger("main")

app = typer.Typer(
    name="code-insights",
    help="Mirror static-analysis errors into Bitbucket Code Insights reports.",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def cli() -> None:
    """Bitbucket Code Insights reporter."""


def _build_client(config: BitbucketConfig) -> BitbucketApiClient:
    return BitbucketApiClient(config)


@app.command("report")
def report(
    source: Annotated[
        str,
        typer.Argument(help="PHPStan JSON output file, or '-' to read stdin."),
    ] = "-",
    bulk: Annotated[
        bool,
        typer.Option("--bulk/--no-bulk", help="Submit annotations through the bulk endpoint."),
    ] = False,
    repo_owner: Annotated[
        Optional[str], typer.Option("--repo-owner", envvar="BITBUCKET_REPO_OWNER")
    ] = None,
    repo_slug: Annotated[
        Optional[str], typer.Option("--repo-slug", envvar="BITBUCKET_REPO_SLUG")
    ] = None,
    commit: Annotated[
        Optional[str], typer.Option("--commit", envvar="BITBUCKET_COMMIT")
    ] = None,
    clone_dir: Annotated[
        Optional[Path],
        typer.Option("--clone-dir", envvar="BITBUCKET_CLONE_DIR", file_okay=False),
    ] = None,
    base_url: Annotated[
        Optional[str], typer.Option("--base-url", envvar="BITBUCKET_API_URL")
    ] = None,
    proxy_url: Annotated[
        Optional[str], typer.Option("--proxy-url", envvar="BITBUCKET_PROXY_URL")
    ] = None,
    log_level: Annotated[
        str, typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR.")
    ] = "INFO",
    log_dir: Annotated[
        Optional[Path], typer.Option("--log-dir", help="Also write a daily log file here.")
    ] = None,
) -> None:
    """Print the analysis table, then create a report with one annotation per error."""
    setup_logging(
        level=getattr(logging, log_level.upper(), logging.INFO),
        log_dir=str(log_dir) if log_dir else None,
    )

    try:
        config = BitbucketConfig.from_env(
            repo_owner=repo_owner,
            repo_slug=repo_slug,
            commit=commit,
            clone_dir=str(clone_dir) if clone_dir else None,
            base_url=base_url,
            proxy_url=proxy_url,
        )
    except ValidationError as e:
        typer.secho(f"Incomplete Bitbucket configuration:\n{e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    try:
        analysis_result = read_analysis_result(source)
    except (OSError, ParseError) as e:
        typer.secho(f"Could not read analysis result: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    table_formatter = TableErrorFormatter(RelativePathHelper(config.clone_dir))
    with _build_client(config) as client:
        formatter = BitbucketErrorFormatter(table_formatter, client, bulk=bulk)
        try:
            exit_code = formatter.format_errors(analysis_result, Console())
        except InsightsError as e:
            logger.error("Mirroring results to Bitbucket failed: %s", e)
            raise

    raise typer.Exit(code=exit_code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
