"""
stackgen - Code Generator Command-Line Interface
================================================

Reads a syntax tree in JSON form (see stackgen.treeio) and writes the
generated stack machine code as a listing or as JSON.

Usage Examples
--------------
Listing to stdout:
    $ stackgen program.json

JSON output to a file:
    $ stackgen program.json --json -o program.sm.json

Inspect the tree instead of generating:
    $ stackgen program.json --ast

Verbose mode (debug logging, tracebacks on internal errors):
    $ stackgen -v program.json
"""

import json
import logging
from pathlib import Path
from typing import Optional

import click

from stackgen import __version__
from stackgen.ast import ASTPrinter
from stackgen.cli.errors import handle_cli_exception
from stackgen.codegen import CodeGenerator, GeneratorOptions
from stackgen.instruction import format_listing
from stackgen.treeio import load_tree


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "--json", "as_json",
    is_flag=True,
    help="Write instructions as a JSON array instead of a listing",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Dump the syntax tree (to -o if given) and exit",
)
@click.option(
    "--stdlib-refs",
    is_flag=True,
    help="Resolve references to standard library functions to their stdlib ids",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="stackgen")
def main(
    input_file: Path,
    output: Optional[Path],
    as_json: bool,
    ast: bool,
    stdlib_refs: bool,
    verbose: bool,
) -> None:
    """
    Generate stack machine code from a syntax tree.

    INPUT_FILE is a JSON document describing the program's syntax tree.

    \b
    Examples:
        stackgen prog.json                # Listing to stdout
        stackgen prog.json -o prog.lst    # Listing to a file
        stackgen prog.json --json         # JSON instruction records
        stackgen prog.json --ast          # Dump the tree
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        tree = load_tree(input_file)

        if ast:
            dump = ASTPrinter().print(tree)
            if output is None:
                click.echo(dump)
            else:
                output.write_text(dump + "\n")
                click.echo(f"Wrote syntax tree: {input_file} -> {output}")
            return

        generator = CodeGenerator(GeneratorOptions(stdlib_function_refs=stdlib_refs))
        instructions = generator.generate(tree)

        if as_json:
            text = json.dumps([instr.to_dict() for instr in instructions], indent=2)
        else:
            text = format_listing(instructions)

        if output is None:
            click.echo(text)
        else:
            output.write_text(text + "\n")
            click.echo(f"Generated {len(instructions)} instructions: {input_file} -> {output}")

        if verbose:
            click.echo(f"Names: {', '.join(generator.variable_names) or '(none)'}", err=True)
            constants = ", ".join(str(c) for c in generator.constant_values)
            click.echo(f"Constants: {constants or '(none)'}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
