"""Setup script for kg-transform-lib."""

from setuptools import find_packages, setup

setup(
    name="kg-transform-lib",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.24",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
)
