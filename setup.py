"""Setup script for the sensorhub package."""

from setuptools import find_packages, setup

setup(
    name="sensorhub",
    version="0.1.0",
    description="Device telemetry ingestion and current-state queries",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.9",
    install_requires=[
        "pymysql",
        "pyyaml",
        "python-dotenv",
        "aiohttp>=3.9",
        "rich",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-asyncio",
            "black",
            "isort",
            "mypy",
        ],
    },
    entry_points={
        "console_scripts": [
            "sensorhub-import=sensorhub.ingest:main",
            "sensorhub-api=sensorhub.api:main",
            "sensorhub-display=sensorhub.display:main",
        ],
    },
)
