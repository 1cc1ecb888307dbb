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

from pathlib import Path
from typing import Any, Dict, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from defamed.template_extensions import TemplateExtensions
from defamed.types import Signature

TEMPLATES_PATH = Path(__file__).parent / "templates"


class TemplateAccessor(Environment):

    def __init__(self: "TemplateAccessor",
                 templates_path: Path,
                 *args: Sequence[Any],
                 **kwargs: Dict[str, Any]) -> None:
        opts = {
            "loader": FileSystemLoader(str(templates_path)),
            "keep_trailing_newline": False,
            "trim_blocks": True,
            "lstrip_blocks": True,
            "undefined": StrictUndefined,
            "extensions": [TemplateExtensions],
        }
        opts.update(kwargs)
        super().__init__(*args, **opts)

    def emit(self: "TemplateAccessor", template_path: str, **kwargs) -> str:
        template = self.get_template(template_path)
        return template.render(**kwargs)


class RustTemplateAccessor(TemplateAccessor):

    def __init__(self: "RustTemplateAccessor",
                 *args: Sequence[Any],
                 templates_path: Path = TEMPLATES_PATH / "rust",
                 **kwargs: Dict[str, Any]) -> None:
        super().__init__(templates_path, *args, **kwargs)

    def emit_macro_rules(self: "RustTemplateAccessor",
                         signature: Signature,
                         path: str,
                         rules: Sequence[Any],
                         trailing_comma: bool) -> str:
        return self.emit("macro_rules.jinja",
                         signature=signature,
                         path=path,
                         rules=rules,
                         trailing_comma=trailing_comma)

    def emit_rule(self: "RustTemplateAccessor",
                  matchers: Sequence[Any],
                  expansion: str,
                  trailing_comma: bool) -> str:
        return self.emit("partials/rule.jinja",
                         matchers=matchers,
                         expansion=expansion,
                         trailing_comma=trailing_comma)

    def emit_module(self: "RustTemplateAccessor",
                    name: str,
                    definitions: Sequence[str],
                    sources: Sequence[str]) -> str:
        return self.emit("module.jinja",
                         name=name,
                         definitions=definitions,
                         sources=sources)
