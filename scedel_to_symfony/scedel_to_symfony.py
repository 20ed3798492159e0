import json
import logging
import sys

import click

from .cli_utils import format_exception_details, format_warning, reconstruct_command_line
from .pipeline import AtomicWriter, CodegenOptions, SchemaLoader, SymfonyCodeGenerator

logger = logging.getLogger(__name__)


def _load_options(config: str | None) -> CodegenOptions:
    if config is None:
        return CodegenOptions()

    with open(config, encoding="utf-8") as f:
        return CodegenOptions.from_dict(json.load(f))


@click.command()
@click.option("--output-dir", "-o", default=None, type=str, help="Directory for classes without a php.codegen.dir annotation")
@click.option("--namespace", "-n", default=None, type=str, help="Namespace for classes without a php.codegen.namespace annotation")
@click.option("--no-constructor", is_flag=True, default=False, help="Do not generate constructors")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log pipeline progress to stderr")
@click.argument("schema", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.pass_context
def scedel_to_symfony(ctx, output_dir, namespace, no_constructor, config, verbose, schema):
    """Generate Symfony validation classes from a Scedel SCHEMA document."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")
        logger.debug("Running %s", reconstruct_command_line(scedel_to_symfony))

    try:
        options = _load_options(config)

        # Explicit flags override the config file
        if output_dir is not None:
            options.output_dir = output_dir
        if namespace is not None:
            options.default_namespace = namespace
        if no_constructor:
            options.generate_constructors = False

        repository = SchemaLoader().load_file(schema)
        result = SymfonyCodeGenerator().generate(repository, options)

        writer = AtomicWriter()
        for generated in result.files:
            target = writer.write(generated.path, generated.contents)
            click.echo(f"generated: {target}")
    except Exception as e:
        logger.debug("Generation failed", exc_info=True)
        click.echo("Failed to generate Symfony classes:", err=True)
        for line in format_exception_details(e):
            click.echo(f"- {line}", err=True)
        ctx.exit(2)

    click.echo()
    click.echo(f"Generated {len(result.files)} class file(s).")

    if result.warnings:
        click.echo()
        click.echo("Warnings:")
        for warning in result.warnings:
            click.echo(format_warning(warning))
