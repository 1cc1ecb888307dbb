from pathlib import Path

from setuptools import find_packages, setup

ROOT = Path(__file__).parent


def read_version() -> str:
    init_file = ROOT / "src" / "defamed" / "__init__.py"
    with open(init_file, "rt") as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip("\"")
    raise RuntimeError(f"Unable to find __version__ in {init_file}")


setup(
    name="defamed",
    version=read_version(),
    description=("Generates call forms that let positional-only items be "
                 "called with named and defaulted arguments."),
    license="MIT",
    python_requires=">=3.8",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "defamed": ["templates/rust/*.jinja",
                    "templates/rust/partials/*.jinja"],
    },
    include_package_data=True,
    install_requires=[
        "Cerberus",
        "click",
        "Jinja2",
        "PyYAML",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "defamed-gen = defamed.scripts.defamed_gen:main",
            "defamed-expand = defamed.scripts.defamed_expand:main",
        ],
    },
)
