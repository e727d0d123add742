from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="blockwatch",
    version="0.1.0",
    author="blockwatch Contributors",
    description="Ethereum address watch-list and per-address transaction cache",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.10",
    install_requires=[
        "aiohttp>=3.10.10",
        "structlog>=24.4.0",
        "pydantic>=2.9.2",
        "pydantic-settings>=2.6.1",
        "python-dotenv>=1.0.1",
        "click>=8.1.8",
        "rich>=13.9.4",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "blockwatch=blockwatch.cli:main",
        ],
    },
)
