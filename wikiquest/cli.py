"""CLI commands for Flask application."""

import click
from flask.cli import with_appcontext


@click.group()
def progression():
    """Level and streak maintenance commands."""
    pass


@progression.command()
@with_appcontext
def levels():
    """Print the configured level threshold table."""
    from wikiquest.progression import get_level_engine

    table = get_level_engine().table
    click.echo("Level  Threshold")
    for level, threshold in enumerate(table, start=1):
        click.echo(f"{level:>5}  {threshold:>9}")


@progression.command("recompute-levels")
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show which users would change without saving",
)
@with_appcontext
def recompute_levels(dry_run):
    """Bring stored level markers in line with each user's XP total."""
    from wikiquest import db
    from wikiquest.models import User
    from wikiquest.progression import get_level_engine

    engine = get_level_engine()
    changed = 0

    for user in User.query.order_by(User.id).all():
        expected = engine.level_for_xp(user.total_xp or 0)
        if user.level != expected:
            click.echo(f"  user {user.id}: level {user.level} -> {expected}")
            changed += 1
            if not dry_run:
                user.level = expected

    if dry_run:
        click.echo(f"Dry run: {changed} users would change")
        return

    db.session.commit()
    click.echo(f"Done! Updated {changed} users")
