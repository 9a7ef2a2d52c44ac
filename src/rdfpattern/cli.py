"""Command line interface for :mod:`rdfpattern`."""

from typing import Dict, Optional, Tuple

import click

from .config import RDFConfig
from .exceptions import RDFPatternError
from .models import GenerationOptions
from .settings import Settings
from .sparql import compile_where, generate_query
from .validator import Validator
from .version import VERSION

__all__ = [
    "main",
]


def _parse_params(params: Tuple[str, ...]) -> Dict[str, str]:
    parameters = {}
    for param in params:
        name, sep, value = param.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=VALUE, got '{param}'", param_hint="--param")
        parameters[name.strip()] = value.strip()
    return parameters


@click.group()
@click.version_option(version=VERSION)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    r"""RDFPattern - SPARQL generation from RDF-config models.

    Compile RDF-config directories (prefix.yaml, model.yaml, sparql.yaml)
    into SPARQL SELECT queries.


    Typical workflow: validate > sparql
    """
    import logging

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            force=True,
        )
        logging.getLogger("rdfpattern").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s", force=True)


@main.command()
@click.argument("config_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--query", "-q", "query_name", help="Named query from sparql.yaml")
@click.option(
    "--variable",
    "variables",
    multiple=True,
    help="Variable to select (repeatable, overrides the named query)",
)
@click.option(
    "--param",
    "params",
    multiple=True,
    help="Parameter binding as NAME=VALUE (repeatable)",
)
@click.option("--template", is_flag=True, help="Emit {{name}} placeholders for parameters")
@click.option("--no-values", is_flag=True, help="Do not emit VALUES lines")
@click.option(
    "--indent",
    type=click.IntRange(min=0),
    default=Settings.INDENT_WIDTH,
    show_default=True,
    help="Spaces per indentation level",
)
@click.option(
    "--limit",
    type=click.IntRange(min=0),
    default=Settings.LIMIT,
    help="LIMIT of the query (0 = none)",
)
@click.option("--where-only", is_flag=True, help="Print only the WHERE block")
def sparql(
    config_dir: str,
    query_name: Optional[str],
    variables: Tuple[str, ...],
    params: Tuple[str, ...],
    template: bool,
    no_values: bool,
    indent: int,
    limit: int,
    where_only: bool,
) -> None:
    """Generate a SPARQL query from an RDF-config directory.

    Variables and parameters come from the named query in sparql.yaml
    (the first one when --query is omitted), unless --variable is given.
    Without any of them every variable of the model is selected.


    Example:
      rdfpattern sparql config/uniprot -q protein --param mnemonic=A4_HUMAN
    """
    parameters = _parse_params(params)

    try:
        config = RDFConfig(config_dir)
        model = config.model()

        selected = list(variables) or None
        query_parameters: Dict[str, object] = {}
        if query_name is not None or (selected is None and config.queries):
            query = config.query(query_name)
            query_parameters.update(query.parameters)
            if selected is None and query.variables:
                selected = query.variables
        query_parameters.update(parameters)

        options = GenerationOptions(
            emit_values_lines=not no_values,
            template_mode=template,
            indent_unit=" " * indent,
        )
        if where_only:
            lines = compile_where(model, selected, query_parameters, options)
        else:
            lines = generate_query(model, selected, query_parameters, options, limit=limit or None)

    except RDFPatternError as e:
        click.echo(f"Error: {e}", err=True)
        raise click.Abort()

    click.echo("\n".join(lines))


@main.command()
@click.argument("config_dir", type=click.Path(exists=True, file_okay=False))
def validate(config_dir: str) -> None:
    """Validate the model of an RDF-config directory.

    Reports every problem found, one per line.


    Example:
      rdfpattern validate config/uniprot
    """
    try:
        config = RDFConfig(config_dir)
        validator = Validator(config.build_subjects(), config.prefixes)
        errors = validator.validate()
    except RDFPatternError as e:
        click.echo(f"Error: {e}", err=True)
        raise click.Abort()

    if errors:
        for error in errors:
            click.echo(error, err=True)
        raise click.Abort()

    click.echo(f"OK {config_dir} is valid")


if __name__ == "__main__":
    main()
