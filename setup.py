from setuptools import setup, find_packages

setup(
    name="pfpost",
    version="0.1.0",
    description="Distributed postprocessing for phase-field fracture finite-element solutions",
    author="pfpost developers",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.20",
        "scipy>=1.7",
        "matplotlib>=3.4",
    ],
    extras_require={
        "mpi": ["mpi4py>=3.1"],
        "dev": ["pytest>=6.0"],
    },
)
