"""
Setup script for forne.

Forne is a dead-simple, scriptable spaced repetition tool. It serves two
roles:

1. Library - a re-entrant session engine any frontend can drive
2. CLI - learn and test card sets straight from the terminal

Learning methods and document adapters are small Python scripts; a few
ship with forne and users can bring their own.
"""

from setuptools import find_packages, setup

setup(
    name="forne",
    version="0.1.0",
    description="Scriptable spaced repetition engine and CLI",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Forne contributors",
    packages=find_packages(include=["forne", "forne.*"]),
    package_data={
        "forne": ["bundled/methods/*.py", "bundled/adapters/*.py"],
    },
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.5.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "forne=forne.cli:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning spaced-repetition flashcards cli education",
)
