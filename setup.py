from __future__ import annotations

from setuptools import find_packages, setup

from config.version import PROJECT_VERSION, PYTHON_REQUIRES_SPECIFIER

if __name__ == "__main__":
    setup(
        name="offer-tracker",
        version=PROJECT_VERSION,
        description="Quality score and trend tracking for advertising offers",
        python_requires=PYTHON_REQUIRES_SPECIFIER,
        packages=find_packages(include=["config", "offertrack", "src", "src.*"]),
        py_modules=["run_scoring"],
        install_requires=[
            "pydantic>=2.5",
            "loguru>=0.7",
            "python-dotenv>=1.0",
            "tomli>=2.0; python_version < '3.11'",
            "tomli-w>=1.0",
            "fastapi>=0.110",
        ],
        extras_require={
            "test": [
                "pytest>=7.4",
                "hypothesis>=6.90",
                "httpx>=0.25",
            ],
        },
        entry_points={
            "console_scripts": [
                "offertrack-config=offertrack.config_manager:main",
                "offertrack-score=run_scoring:main",
            ],
        },
    )
