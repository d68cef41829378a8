from setuptools import find_packages, setup

setup(
    name="postmeta",
    version="0.1.0",
    description="Front-matter loading and validation for static-site blog posts.",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "structlog>=23.1.0",
        "pydantic>=2.6.0",
        "typer>=0.9.0",
        "rich>=13.0.0",
        "pyyaml>=6.0.1",
        "aiofiles>=23.2.1",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "postmeta=postmeta.cli:app",
        ],
    },
    python_requires=">=3.11",
)
