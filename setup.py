from setuptools import setup, find_packages

from codecs import open
from os import path

here = path.abspath(path.dirname(__file__))

with open(path.join(here, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="ivybake",
    version="1.0",
    description="Install Apache Ivy and stage project dependencies.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Build Tools",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.8",
    ],
    keywords="build ivy java dependencies",
    packages=find_packages(exclude=["examples"]),
    python_requires=">=3.8",
    install_requires=["xeno>=4.1.0,<5", "ansilog", "tree-format", "requests"],
    extras_require={},
    package_data={"ivybake": []},
    data_files=[],
    entry_points={"console_scripts": ["ivybake=ivybake.bake:main"]},
)
