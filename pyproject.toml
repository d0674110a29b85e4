[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "centrifuger"
version = "1.0.8"
description = "Taxonomy, read parsing, barcode handling and compact data structures for metagenomic read classification"
requires-python = ">=3.10"
dependencies = []
keywords = ["metagenomics", "taxonomy", "bioinformatics", "barcode", "fastq", "fasta"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["centrifuger"]

[tool.pytest.ini_options]
addopts = "-ra"
