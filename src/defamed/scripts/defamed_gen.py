r"""
 By Dylon Edwards

 Copyright 2023 GSI Technology, Inc.

 Permission is hereby granted, free of charge, to any person obtaining a copy of
 this software and associated documentation files (the “Software”), to deal in
 the Software without restriction, including without limitation the rights to
 use, copy, modify, merge, publish, distribute, sublicense, and/or sell copies of
 the Software, and to permit persons to whom the Software is furnished to do so,
 subject to the following conditions:

 The above copyright notice and this permission notice shall be included in all
 copies or substantial portions of the Software.

 THE SOFTWARE IS PROVIDED “AS IS”, WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
 IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY, FITNESS
 FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR
 COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER
 IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
 CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.
"""

import logging
import sys
from pathlib import Path

import click

from defamed.compiler import compile_declaration
from defamed.dispatch import Strategy, TableRegistry
from defamed.emitters import MacroGenerator
from defamed.types import Declaration
from defamed.utils.log_utils import LogLevel, init_logger
from defamed.utils.script_utils import (DefaultHelp, collect_config,
                                        collect_log_level,
                                        for_each_declaration)

SCRIPT_NAME = "defamed-gen"

LOGGER = logging.getLogger()


@click.command(cls=DefaultHelp)
@click.option("-o", "--output", "output_file",
              help="Path to the Rust source file to generate.",
              type=click.Path(exists=False, file_okay=True, dir_okay=False),
              required=True)
@click.option("--trailing-comma/--no-trailing-comma", "trailing_comma",
              help="Whether generated macros accept a trailing comma. "
                   "[Default: from config]",
              default=None)
@click.option("--config", "config",
              help="Specifies path to the defamed config YAML file.",
              callback=collect_config,
              required=False)
@click.option("--log-level", "log_level",
              help="Specifies the verbosity of output from the generator.",
              type=click.Choice(LogLevel.names()),
              default=LogLevel.DEFAULT.name,
              callback=collect_log_level,
              required=False)
@click.argument("declarations_files", nargs=-1, required=True)
def main(**kwargs) -> None:
    """Generates `macro_rules!` definitions accepting positional, named and
    defaulted arguments for every declared item.

    Example Usage:

        defamed-gen -o src/generated.rs declarations.yaml

        defamed-gen -o src/generated.rs path/to/items.py::some_fn

        defamed-gen -o src/generated.rs path/to/declarations/"""

    global LOGGER, SCRIPT_NAME
    init_logger(LOGGER, SCRIPT_NAME, log_level=kwargs["log_level"])

    for arg, val in kwargs.items():
        LOGGER.debug("%s = %s", arg, val)

    config = kwargs["config"]
    trailing_comma = kwargs["trailing_comma"]
    if trailing_comma is None:
        trailing_comma = config["trailing_comma"]

    output_file = Path(kwargs["output_file"])
    if output_file.suffix != ".rs":
        raise ValueError(
            f"output file name must end with .rs: {output_file.name}")

    generator = MacroGenerator(trailing_comma=trailing_comma)
    registry = TableRegistry()
    definitions = []
    sources = []

    def callback(path: Path, declaration: Declaration) -> None:
        nonlocal definitions, sources
        # Token-matching macros need every literal ordering of the names.
        compilation = compile_declaration(declaration,
                                          config=config,
                                          registry=registry,
                                          strategy=Strategy.EXHAUSTIVE)
        definitions.append(generator.generate(compilation.table))
        if str(path) not in sources:
            sources.append(str(path))

    num_declarations = for_each_declaration(kwargs["declarations_files"],
                                            callback)
    if num_declarations == 0:
        raise ValueError("No declarations found")

    module = generator.generate_module(name=output_file.stem,
                                       definitions=definitions,
                                       sources=sources)

    output_file.parent.mkdir(parents=True, exist_ok=True)

    if output_file.exists():
        with open(output_file, "rt") as f:
            if module == f.read():
                LOGGER.info(f"No changes, skipping file: {output_file} ...")
                return

    LOGGER.info(f"Generating: {output_file} ...")
    with open(output_file, "wt") as f:
        f.write(module)

    LOGGER.info("Done.")


if __name__ == "__main__":
    try:
        main()
    except Exception:
        LOGGER.exception("Failed to generate defamed macros")
        sys.exit(1)
