"""Setup script for flowgraph: ensures package discovery works with setuptools."""
from setuptools import setup, find_packages

# Explicit package discovery for reliable build (editable and wheel)
setup(
    name="flowgraph",
    version="0.1.0",
    description="Compile visual block diagrams into linear flow pipeline source",
    python_requires=">=3.9",
    packages=find_packages(where=".", include=("flowgraph", "flowgraph.*")),
    package_dir={"": "."},
    install_requires=[
        "omegaconf>=2.3",
        "pydantic>=2.0",
        "jsonschema>=4.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["flowgraph=flowgraph.cli:main"],
    },
)
