from setuptools import setup, find_packages

setup(
    name="ephysforge",
    version="0.1.0",
    description="Simulator of extracellular tetrode recordings: dipole neurons, volume conduction, band-pass conditioning and spike detection",
    author="EphysForge Contributors",
    license="MIT",
    packages=find_packages(include=["ephysforge", "ephysforge.*"]),
    python_requires=">=3.9",
    install_requires=[
        "torch>=1.12.0",
        "numpy>=1.21.0",
        "PyYAML>=6.0",
        "tqdm>=4.60",
    ],
    extras_require={
        "examples": [
            "matplotlib>=3.5",
        ],
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=3.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "ephysforge=ephysforge.cli:main",
        ],
    },
)
