# SPDX-License-Identifier: MIT
# Copyright (c) 2025 DevOpsMaestro contributors

"""Setup configuration for the dvm-secrets package."""

from setuptools import find_packages, setup

setup(
    name="dvm-secrets",
    version="0.1.0",
    description="Secret reference resolution for DevOpsMaestro configuration",
    author="DevOpsMaestro contributors",
    license="MIT",
    packages=find_packages(include=["dvm_secrets", "dvm_secrets.*", "dvm_logging", "dvm_logging.*"]),
    install_requires=[
        # No external dependencies - the core uses the standard library only
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
        "azure": [
            "azure-keyvault-secrets>=4.7.0",
            "azure-identity>=1.12.0",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.12",
    ],
)
