"""Inspect and rewrite tag queries without touching the library."""

from __future__ import annotations

import json

import click

from pixstash.cli import Context, pass_context
from pixstash.search.mutator import remove_tag
from pixstash.search.parser import parse_query


@click.group("query")
def cli() -> None:
    """Work with query strings.

    \b
    Examples:
      pixstash query explain "girl or cat -dog rating:g,s"
      pixstash query remove-tag "dog or cat or girl" cat
    """


@cli.command("explain", context_settings={"ignore_unknown_options": True})
@click.argument("query", nargs=-1)
@pass_context
def explain(ctx: Context, query: tuple[str, ...]) -> None:
    """Print the structured filter a query compiles to, as JSON."""
    parsed = parse_query(" ".join(query))
    click.echo(json.dumps(parsed.to_dict(), indent=2))


@cli.command("remove-tag", context_settings={"ignore_unknown_options": True})
@click.argument("query")
@click.argument("tag")
@pass_context
def remove_tag_cmd(ctx: Context, query: str, tag: str) -> None:
    """Remove TAG from QUERY, keeping the surrounding "or" chain valid."""
    click.echo(remove_tag(query, tag))
