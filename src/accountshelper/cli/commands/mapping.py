"""Category mapping commands."""

import click
from accountshelper.domain.category_matcher import CategoryMatcher
from accountshelper.domain.enums import Category
from accountshelper.domain.errors import DomainError
from accountshelper.cli.error_handling import handle_domain_error
from accountshelper.cli.resolution import resolve_category_or_exit


@click.group()
def mapping_group():
    """Teach and apply payee to category mappings."""
    pass


@mapping_group.command("teach")
@click.argument("text")
@click.argument("category_name")
@click.pass_context
def teach_mapping(ctx, text: str, category_name: str):
    """Teach that payee TEXT belongs to CATEGORY_NAME.

    Examples:
        accountshelper mapping teach "Tesco Stores" FoodHousehold
    """
    matcher = CategoryMatcher(ctx.obj["db"])
    category = resolve_category_or_exit(ctx, category_name)

    try:
        mapping = matcher.teach_mapping(text, category)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if mapping is None:
        click.echo("Error: Mapping text must not be empty", err=True)
        ctx.exit(1)
    click.echo(
        f"Mapped '{mapping.normalized_key}' to {mapping.category.description} "
        f"(used {mapping.usage_count} time(s))"
    )


@mapping_group.command("match")
@click.argument("text")
@click.pass_context
def match_mapping(ctx, text: str):
    """Show the category that payee TEXT matches.

    Previewing does not change usage counts.
    """
    matcher = CategoryMatcher(ctx.obj["db"])
    try:
        category = matcher.preview_category(text)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if category is Category.unknown:
        click.echo(f"No mapping matches '{text}'")
    else:
        click.echo(f"'{text}' -> {category.description}")


@mapping_group.command("list")
@click.pass_context
def list_mappings(ctx):
    """List learned mappings."""
    mappings = CategoryMatcher(ctx.obj["db"]).list_mappings()
    if not mappings:
        click.echo("No mappings found.")
        return

    click.echo(f"{'ID':<6} {'Text':<40} {'Category':<20} {'Uses':>6}")
    click.echo("-" * 75)
    for m in mappings:
        click.echo(f"{m.id:<6} {m.normalized_key[:40]:<40} {m.category.description:<20} {m.usage_count:>6}")


@mapping_group.command("reapply")
@click.pass_context
def reapply_mappings(ctx):
    """Categorize uncategorized transactions using the current mappings."""
    matcher = CategoryMatcher(ctx.obj["db"])
    try:
        updated = matcher.reapply_mappings_to_unknown_transactions()
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Categorized {updated} transaction(s)")


def register_commands(cli):
    """Register mapping commands with main CLI."""
    cli.add_command(mapping_group, name="mapping")
