from setuptools import find_packages, setup

setup(
    name="xtalsym",
    version="0.1.0",
    description="Crystallographic symmetry operations and space groups "
    "from Hall and explicit symbols",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pyparsing>=3.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
