"""
appstorage setup.py — Package configuration and CLI entry point.
"""

from setuptools import find_packages, setup

setup(
    name="appstorage",
    version="1.0.0",
    description="appstorage — Cross-platform application storage with collision policies",
    packages=find_packages(include=["appstorage", "appstorage.*"]),
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "appstorage=appstorage.cli:main",
        ],
    },
    install_requires=[
        "pydantic>=2.5",
        "pyyaml>=6.0",
        "platformdirs>=4.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
)
