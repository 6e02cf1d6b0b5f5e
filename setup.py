"""
Setup script for cubemeasure.
"""

from setuptools import find_packages
from setuptools import setup

LIBRARY = "cubemeasure"

# Read version and metadata
with open(f"{LIBRARY}/__version__.py", "r", encoding="UTF8") as v:
    exec(v.read())

with open("README.md", "r", encoding="UTF8") as f:
    long_description = f.read()

# Setup configuration
setup(
    name=LIBRARY,
    version=__version__,
    description="Measure type resolution for OLAP cubes",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=[LIBRARY, f"{LIBRARY}.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "orjson",
        "orso",
        "pyarrow",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["cubemeasure=cubemeasure.__main__:main"]},
    zip_safe=False,
)
