"""
Setup script for ielts-config-service.

The IELTS config service owns the versioned option catalog behind IELTS
assignment authoring and the domain model that repairs persisted
assignment configs:

1. Catalog API - versioned option sets, boolean option values, type cards
2. Domain model - assignment config and question variant unions
3. Normalizer - turns stale or corrupted persisted configs into valid ones

The 'ielts-config' command seeds and inspects the catalog and runs the API.
"""

from setuptools import find_packages, setup

setup(
    name="ielts-config-service",
    version="0.1.0",
    description="Versioned IELTS assignment configuration catalog and domain model",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config", "main"],
    python_requires=">=3.10",
    install_requires=[
        # API
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Database
        "sqlalchemy[asyncio]>=2.0.0",
        "asyncpg>=0.29.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "aiosqlite>=0.19.0",
            "httpx>=0.25.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ielts-config=src.cli.ielts_cli:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: FastAPI",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="ielts assignments configuration catalog fastapi",
)
