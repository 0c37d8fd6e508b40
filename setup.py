"""
Setup script for blockconv

Pure-Python package in the src/ layout. pytest settings and the build
backend live in pyproject.toml.
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from src/blockconv/__init__.py
def get_version():
    version_file = Path("src/blockconv/__init__.py")
    if version_file.exists():
        for line in version_file.read_text(encoding="utf-8").splitlines():
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.1.0"


# Read long description from README
def get_long_description():
    readme = Path("README.md")
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="blockconv",
    version=get_version(),
    description="Conversion layer between dense/sparse matrix blocks, frames, arrays and storage",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.20",
        "scipy>=1.7",
    ],
    extras_require={
        "pandas": ["pandas>=1.3"],
        "test": ["pytest>=7.0", "pandas>=1.3"],
    },
    zip_safe=True,
)
