from setuptools import setup, find_packages

setup(
    name="spatial-moments",
    version="1.0.0",
    license="AGPL-3.0-or-later",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "click>=8.1",
        "numpy<2.0",
        "matplotlib",
        "scipy",
        "pydantic>=2.0",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": [
            "spatial-moments=spatial_moments.cli:main",
        ],
    },
)
