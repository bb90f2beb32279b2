from pathlib import Path
from setuptools import find_packages, setup

README = Path(__file__).parent / "README.md"


def _version() -> str:
    init = Path(__file__).parent / "src" / "amalgamate" / "__init__.py"
    for line in init.read_text(encoding="utf-8").splitlines():
        if line.startswith("__version__"):
            return line.split("=", 1)[1].strip().strip("'\"")
    raise RuntimeError("__version__ not found in src/amalgamate/__init__.py")


setup(
    name="amalgamate",
    version=_version(),
    description="Combine C/C++ sources into one file, inlining each included header once",
    long_description=README.read_text(encoding="utf-8") if README.exists() else "",
    long_description_content_type="text/markdown",
    author="GAHEOS",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[],
    extras_require={"test": ["pytest>=7"]},
    entry_points={"console_scripts": ["amalgamate=amalgamate.cli:main"]},
)
