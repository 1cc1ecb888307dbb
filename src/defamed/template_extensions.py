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

from typing import Any

from jinja2 import Environment
from jinja2.ext import Extension

from defamed.types import Argument, Signature


class TemplateExtensions(Extension):

    def __init__(self: "TemplateExtensions", environment: Environment) -> None:
        super().__init__(environment)

        # Predicates
        environment.tests.update({
            "exported": self.is_exported,
        })

        # Filters
        environment.filters.update({
            "matcher": self.fmt_matcher,
            "indent_lines": self.indent_lines,
        })

        # Globals
        environment.globals.update({
            "emit_banner": self.emit_banner,
        })

    ## ========== ##
    ## Predicates ##
    ## ========== ##

    def is_exported(self: "TemplateExtensions", signature: Signature) -> bool:
        return not signature.visibility.is_private

    ## ======= ##
    ## Filters ##
    ## ======= ##

    def fmt_matcher(self: "TemplateExtensions", argument: Argument) -> str:
        metavar = argument.value
        if argument.key is None:
            return f"{metavar}:expr"
        return f"{argument.key} = {metavar}:expr"

    def indent_lines(self: "TemplateExtensions",
                     text: str,
                     width: int = 4) -> str:
        prefix = " " * width
        return "\n".join(f"{prefix}{line}" if len(line) > 0 else line
                         for line in text.split("\n"))

    ## ======= ##
    ## Globals ##
    ## ======= ##

    def emit_banner(self: "TemplateExtensions", **kwargs: Any) -> str:
        template = self.environment.get_template("partials/banner.jinja")
        return template.render(**kwargs)
