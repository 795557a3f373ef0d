"""Click CLI for Nitpick."""

from typing import Optional

import click

from nitpick import __version__
from nitpick.config import MissingTokenError, NitpickConfig, usage_message
from nitpick.github import GitHubClient, GitHubFetcher
from nitpick.log import configure_logging


@click.command()
@click.version_option(version=__version__, prog_name="nitpick")
@click.option("--theme", default=None, help="Textual theme (overrides the config file).")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for ~/.nitpick/nitpick.log.",
)
def cli(theme: Optional[str], log_level: Optional[str]) -> None:
    """Nitpick - browse pull request review comments.

    Walk your repositories, their open pull requests and the review
    comments on them, then copy a comment as a prompt for an AI assistant.

    Keyboard shortcuts:
        Enter        - Open selected item
        Esc          - Back (or clear filter)
        /            - Filter list
        j/k, ↑/↓     - Move / scroll
        h/l, PgUp/Dn - Page
        g/G          - First / last
        r            - Show/hide replies (comments)
        c            - Copy prompt (comment detail)
        t            - Toggle full/simple prompt
        q, Ctrl+C    - Quit

    The GitHub token is read from GITHUB_TOKEN, a .env file, or
    ~/.nitpick/config.json.
    """
    config = NitpickConfig.load()

    try:
        token = config.resolve_token()
    except MissingTokenError:
        click.echo(usage_message(), err=True)
        raise SystemExit(1)

    configure_logging(log_level or config.log_level)

    from nitpick.tui import NitpickApp

    fetcher = GitHubFetcher(GitHubClient(token, base_url=config.api_url))
    app = NitpickApp(fetcher, theme=theme or config.theme)
    app.run()


if __name__ == "__main__":
    cli()
