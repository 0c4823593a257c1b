from setuptools import setup, find_packages

setup(
    name="ellsino",
    version="0.1.0",
    description="Analytic sinograms of ellipse phantoms for parallel-beam, fan-beam and mojette CT geometries",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["ellsino", "ellsino.*"]),
    install_requires=[
        "numpy",
        "numba",
        "torch",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    license="Apache 2.0",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Topic :: Scientific/Engineering :: Medical Science Apps",
    ],
    python_requires=">=3.10",
)
