from setuptools import setup, find_packages

setup(
    name="attestation-tracker",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "aiohttp>=3.8.5",
        "pydantic>=2.3.0",
        "python-dotenv>=1.0.0",
        "tenacity>=8.2.3",
        "structlog>=23.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "attestation-tracker=attestation_tracker.main:run",
            "attestations-of-epoch=attestation_tracker.cli:epoch_entry",
            "missed-late-attestations=attestation_tracker.cli:survey_entry",
            "pubkeys-to-indexes=attestation_tracker.cli:resolve_entry",
        ],
    },
    description="Missed and late attestation reports for Ethereum validators",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.9",
)
