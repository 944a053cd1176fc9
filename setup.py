"""
Setup configuration for Keygate
"""

from setuptools import setup, find_packages

with open("requirements.txt") as f:
    requirements = f.read().splitlines()

setup(
    name="keygate",
    version="0.1.0",
    description="Time-limited access key issuance with per-user cooldown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["keygate_api"],
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.4", "pytest-asyncio>=0.23", "httpx>=0.27"],
    },
    entry_points={
        "console_scripts": ["keygate-api=keygate_api:main"],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
