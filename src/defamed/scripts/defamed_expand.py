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

from defamed.compiler import compile_declaration, expand_call
from defamed.dispatch import Strategy, TableRegistry
from defamed.types import Declaration
from defamed.utils.log_utils import LogLevel, init_logger
from defamed.utils.script_utils import (DefaultHelp, collect_config,
                                        collect_log_level,
                                        for_each_declaration)

SCRIPT_NAME = "defamed-expand"

LOGGER = logging.getLogger()


@click.command(cls=DefaultHelp)
@click.option("-d", "--declarations", "declarations_files",
              help="Path to a declarations file (.yaml, .yml or .py) or a "
                   "directory of them. May be given more than once.",
              multiple=True,
              required=True)
@click.option("--scope", "scope",
              help="Scope token of the item, when its name is ambiguous.",
              required=False)
@click.option("--strategy", "strategy",
              help="How call sites are matched. [Default: from config]",
              type=click.Choice(Strategy.values()),
              required=False)
@click.option("--config", "config",
              help="Specifies path to the defamed config YAML file.",
              callback=collect_config,
              required=False)
@click.option("--log-level", "log_level",
              help="Specifies the verbosity of output from the expander.",
              type=click.Choice(LogLevel.names()),
              default=LogLevel.DEFAULT.name,
              callback=collect_log_level,
              required=False)
@click.argument("item")
@click.argument("arguments", default="")
def main(**kwargs) -> None:
    """Expands one call site of a declared item into its canonical,
    fully positional invocation.

    Example Usage:

        defamed-expand -d declarations.yaml some_fn "5, 5, add = false"

        defamed-expand -d items.py Struct "inner = path, idx = 1"
    """

    global LOGGER, SCRIPT_NAME
    init_logger(LOGGER, SCRIPT_NAME, log_level=kwargs["log_level"])

    for arg, val in kwargs.items():
        LOGGER.debug("%s = %s", arg, val)

    config = kwargs["config"]
    strategy = kwargs["strategy"]
    if strategy is None:
        strategy = config["strategy"]
    strategy = Strategy.find_by_value(strategy)

    registry = TableRegistry()

    def callback(path: Path, declaration: Declaration) -> None:
        compile_declaration(declaration,
                            config=config,
                            registry=registry,
                            strategy=strategy)

    for_each_declaration(kwargs["declarations_files"], callback)

    expansion = expand_call(kwargs["item"],
                            kwargs["arguments"],
                            scope=kwargs["scope"],
                            registry=registry)
    click.echo(expansion)


if __name__ == "__main__":
    try:
        main()
    except Exception:
        LOGGER.exception("Failed to expand call site")
        sys.exit(1)
