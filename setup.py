"""
Setup script for interactive_lbm_fluid package.
"""

from setuptools import setup, find_packages

setup(
    name="interactive_lbm_fluid",
    version="0.1.0",
    description="Interactive D2Q9 Lattice Boltzmann fluid with cursor forcing",
    author="Andrey",
    packages=find_packages(include=["lbm_fluid", "lbm_fluid.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20",
        "numba>=0.56",
        "matplotlib>=3.5",
    ],
    extras_require={
        "dev": ["pytest>=7.0", "black", "flake8"],
    },
)
