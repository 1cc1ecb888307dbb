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
from importlib.util import module_from_spec, spec_from_file_location
from inspect import getmembers, isclass, isfunction
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, Sequence

import click

from defamed.declarations import load_declarations
from defamed.types import Declaration
from defamed.utils.config_utils import load_config
from defamed.utils.log_utils import LogLevel

LOGGER = logging.getLogger()

YAML_SUFFIXES = (".yaml", ".yml")


def collect_log_level(ctx: click.Context,
                      option: click.Option,
                      log_level: str) -> int:
    log_level = LogLevel[log_level]
    return log_level.value


def collect_config(ctx: click.Context,
                   option: click.Option,
                   config_path: Optional[str]) -> Dict[str, Any]:
    return load_config(config_path)


def collect_declaration_files(declarations_dir: Path) -> Iterator[Path]:
    for candidate_path in sorted(declarations_dir.iterdir()):
        if candidate_path.is_file() \
           and (candidate_path.suffix in YAML_SUFFIXES
                or candidate_path.suffix == ".py"):
            yield candidate_path


def collect_module_declarations(module_file: Path) -> Iterator[Declaration]:
    module_spec = spec_from_file_location(module_file.stem, module_file)
    module = module_from_spec(module_spec)
    module_spec.loader.exec_module(module)

    for _, member in getmembers(module):
        if not (isclass(member) or isfunction(member)) \
           or member.__module__ != module.__name__:
            continue
        # Subclasses inherit the attribute without being declared themselves.
        compilation = vars(member).get("__defamed__")
        if compilation is not None:
            yield compilation.declaration


def collect_declarations(declarations_file: Path) -> Iterator[Declaration]:
    if declarations_file.suffix in YAML_SUFFIXES:
        yield from load_declarations(declarations_file)
    elif declarations_file.suffix == ".py":
        yield from collect_module_declarations(declarations_file)
    else:
        raise ValueError(
            f"Unsupported declarations file (expected .py, .yaml or .yml): "
            f"{declarations_file}")


def for_each_declaration(declarations_files: Sequence[str],
                         fn: Callable[[Path, Declaration], None]) -> int:
    """Invokes `fn` with every declaration found in the given files or
    directories. A file may be suffixed with `::name` to select a single
    declaration. Returns the number of declarations processed."""

    global LOGGER

    num_declarations = 0

    for declarations_file in declarations_files:
        declaration_parts = declarations_file.split("::")
        declarations_path = Path(declaration_parts[0])
        if not declarations_path.exists():
            raise AssertionError(
                f"Declarations file does not exist: {declarations_path}")

        specific_declaration = None
        if len(declaration_parts) == 2:
            specific_declaration = declaration_parts[1]
        elif len(declaration_parts) > 2:
            raise AssertionError(f"Only one declaration may be specified per "
                                 f"file: {declaration_parts}")

        if declarations_path.is_dir():
            if specific_declaration is not None:
                raise AssertionError(
                    f"Cannot select a declaration from a directory: "
                    f"{declarations_file}")
            paths = list(collect_declaration_files(declarations_path))
        else:
            paths = [declarations_path]

        found_declaration = False
        for path in paths:
            LOGGER.info(f"Scanning for declarations in {path} ...")
            for declaration in collect_declarations(path):
                if specific_declaration is not None \
                   and specific_declaration != declaration.name:
                    continue
                try:
                    LOGGER.info(f"Found {declaration.name} in {path}.")
                    found_declaration = True
                    fn(path, declaration)
                    num_declarations += 1
                except Exception as exception:
                    raise RuntimeError(
                        f"Failed to process [{declaration.name}] from: "
                        f"{path}") from exception

        if specific_declaration is not None and not found_declaration:
            raise ValueError(f"Failed to find declaration "
                             f"{specific_declaration} in {declarations_path}")

    return num_declarations


class DefaultHelp(click.Command):

    def __init__(self, *args, **kwargs):
        context_settings = kwargs.setdefault('context_settings', {})
        if 'help_option_names' not in context_settings:
            context_settings['help_option_names'] = ['-h', '--help']
        self.help_flag = context_settings['help_option_names'][0]
        super().__init__(*args, **kwargs)

    def parse_args(self, ctx, args):
        if not args:
            args = [self.help_flag]
        return super().parse_args(ctx, args)
