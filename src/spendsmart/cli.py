"""Flask CLI commands for SpendSmart."""

from __future__ import annotations

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("seed-categories")
    @click.option(
        "--force",
        is_flag=True,
        default=False,
        help="Add missing defaults even when categories already exist",
    )
    def seed_categories_command(force: bool) -> None:
        """Insert the default income and expense categories."""

        from .services.categories import seed_categories

        context = app.extensions["spendsmart"]
        created = seed_categories(context.category_repo, only_if_empty=not force)
        click.echo(f"Categories created: {created}")
