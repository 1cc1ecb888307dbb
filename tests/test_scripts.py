import sys

import pytest

from click.testing import CliRunner

from defamed.scripts import defamed_expand, defamed_gen
from defamed.types import UnmatchedCallError

DECLARATIONS_YAML = """
declarations:
  - name: some_fn
    visibility: pub
    scope: crate::math
    parameters:
      - name: lhs
        type: i32
      - name: rhs
        type: i32
      - name: add
        type: bool
        default: true
      - name: divide_result_by
        type: Option<i32>
        default: None
"""

ITEMS_PY = '''
from defamed.decorators import NamedFields, default, defamed, field


@defamed("crate::geometry", visibility="pub")
def scale(factor: "f32", offset: "f32" = default("0.0")):
    pass


@defamed
class Point(NamedFields):
    x = field("f32")
    y = field("f32", default=default())
'''


@pytest.fixture(autouse=True)
def user_home(monkeypatch, tmp_path):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def declarations_yaml(tmp_path):
    declarations_path = tmp_path / "declarations.yaml"
    declarations_path.write_text(DECLARATIONS_YAML)
    return declarations_path


@pytest.fixture
def items_py(tmp_path):
    items_path = tmp_path / "items.py"
    items_path.write_text(ITEMS_PY)
    return items_path


def test_gen_without_arguments_shows_help() -> None:
    runner = CliRunner()
    result = runner.invoke(defamed_gen.main, [])
    assert result.exit_code == 0
    assert "Usage:" in result.output


def test_gen_from_yaml(tmp_path, declarations_yaml) -> None:
    output_file = tmp_path / "src" / "generated.rs"
    runner = CliRunner()
    result = runner.invoke(defamed_gen.main,
                           ["-o", str(output_file), str(declarations_yaml)])
    assert result.exit_code == 0, result.output

    module = output_file.read_text()
    assert module.startswith("// @generated by defamed from ")
    assert "// Module: generated" in module
    assert "#[macro_export]\nmacro_rules! some_fn {" in module
    assert "$crate::math::some_fn($lhs_val, $rhs_val, true, None)" in module
    assert module.count("=> {") == 57


def test_gen_from_python_module(tmp_path, items_py) -> None:
    output_file = tmp_path / "generated.rs"
    runner = CliRunner()
    result = runner.invoke(defamed_gen.main,
                           ["--no-trailing-comma",
                            "-o", str(output_file),
                            f"{items_py}::Point"])
    assert result.exit_code == 0, result.output

    module = output_file.read_text()
    assert "macro_rules! Point {" in module
    assert "macro_rules! scale" not in module
    assert "$(,)?" not in module
    assert "(y = $y_val:expr, x = $x_val:expr) => {" in module


def test_gen_from_directory(tmp_path, declarations_yaml, items_py) -> None:
    output_file = tmp_path / "out" / "generated.rs"
    runner = CliRunner()
    result = runner.invoke(defamed_gen.main,
                           ["-o", str(output_file), str(tmp_path)])
    assert result.exit_code == 0, result.output

    module = output_file.read_text()
    for name in ["some_fn", "scale", "Point"]:
        assert f"macro_rules! {name} {{" in module


def test_gen_requires_a_rust_output(tmp_path, declarations_yaml) -> None:
    runner = CliRunner()
    result = runner.invoke(defamed_gen.main,
                           ["-o", str(tmp_path / "generated.txt"),
                            str(declarations_yaml)])
    assert result.exit_code != 0
    assert isinstance(result.exception, ValueError)


def test_gen_missing_declaration(tmp_path, items_py) -> None:
    runner = CliRunner()
    result = runner.invoke(defamed_gen.main,
                           ["-o", str(tmp_path / "generated.rs"),
                            f"{items_py}::missing"])
    assert result.exit_code != 0
    assert isinstance(result.exception, ValueError)


@pytest.mark.parametrize("strategy", ["exhaustive", "canonical"])
def test_expand(declarations_yaml, strategy: str) -> None:
    runner = CliRunner()
    result = runner.invoke(defamed_expand.main,
                           ["-d", str(declarations_yaml),
                            "--strategy", strategy,
                            "some_fn", "rhs = 5, lhs = 15, add = false"])
    assert result.exit_code == 0, result.output
    assert "$crate::math::some_fn(15, 5, false, None)" in result.output


def test_expand_python_module(items_py) -> None:
    runner = CliRunner()
    result = runner.invoke(defamed_expand.main,
                           ["-d", str(items_py), "Point", "y = 2, x = 1"])
    assert result.exit_code == 0, result.output
    assert "Point { x: 1, y: 2 }" in result.output


def test_expand_with_config(tmp_path, declarations_yaml) -> None:
    config_path = tmp_path / "defamed.yaml"
    config_path.write_text("root_marker: crate\n")
    runner = CliRunner()
    result = runner.invoke(defamed_expand.main,
                           ["-d", str(declarations_yaml),
                            "--config", str(config_path),
                            "some_fn", "5, 5"])
    assert result.exit_code == 0, result.output
    assert "crate::math::some_fn(5, 5, true, None)" in result.output
    assert "$crate" not in result.output


def test_expand_unmatched_call(declarations_yaml) -> None:
    runner = CliRunner()
    result = runner.invoke(defamed_expand.main,
                           ["-d", str(declarations_yaml),
                            "some_fn", "5, lhs = 3"])
    assert result.exit_code != 0
    assert isinstance(result.exception, UnmatchedCallError)


INHERITED_PY = '''
from defamed.decorators import NamedFields, defamed, field

from items import scale


@defamed
class Base(NamedFields):
    x = field("f32")


class Child(Base):
    pass
'''


def test_gen_skips_inherited_and_imported_declarations(tmp_path, items_py,
                                                       monkeypatch) -> None:
    monkeypatch.syspath_prepend(str(tmp_path))
    inherited_path = tmp_path / "inherited.py"
    inherited_path.write_text(INHERITED_PY)
    output_file = tmp_path / "generated.rs"

    runner = CliRunner()
    result = runner.invoke(defamed_gen.main,
                           ["-o", str(output_file), str(inherited_path)])
    sys.modules.pop("items", None)
    assert result.exit_code == 0, result.output

    module = output_file.read_text()
    assert module.count("macro_rules! Base {") == 1
    assert "macro_rules! Child" not in module
    assert "macro_rules! scale" not in module


def test_gen_is_reproducible(tmp_path, declarations_yaml) -> None:
    output_file = tmp_path / "generated.rs"
    arguments = ["-o", str(output_file), str(declarations_yaml)]
    runner = CliRunner()

    result = runner.invoke(defamed_gen.main, arguments)
    assert result.exit_code == 0, result.output
    first = output_file.read_text()
    first_mtime = output_file.stat().st_mtime_ns

    result = runner.invoke(defamed_gen.main, arguments)
    assert result.exit_code == 0, result.output
    assert output_file.read_text() == first
    assert output_file.stat().st_mtime_ns == first_mtime
