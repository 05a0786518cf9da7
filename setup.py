import pathlib
import re
from setuptools import setup, find_packages

HERE = pathlib.Path(__file__).parent

with open("stylocompare/__init__.py") as f:
    init = f.read()
    VERSION = re.search(r'__version__ = ["\']([^"\']+)["\']', init).group(1)
    AUTHOR = re.search(r'__author__ = ["\']([^"\']+)["\']', init).group(1)
    AUTHOR_EMAIL = re.search(r'__email__ = ["\']([^"\']+)["\']', init).group(1)

PACKAGE_NAME = "stylocompare"
URL = "https://example.org/stylocompare"

LICENSE = "Apache License 2.0"
DESCRIPTION = "Frequency, tf-idf, sentiment and bigram \
      comparison of authorial style across novels"
LONG_DESCRIPTION = (HERE / "README.rst").read_text()
LONG_DESC_TYPE = "text/x-rst"

INSTALL_REQUIRES = [
    "polars>=1.30.0",
    "spacy>=3.8.0",
    "scipy>=1.10.0",
    "numpy>=1.24.0",
    "nltk>=3.8.0",
    "networkx>=3.0",
]

EXTRAS_REQUIRE = {
    "test": [
        "pytest>=7.0",
        "hypothesis>=6.0",
    ],
}

setup(
    name=PACKAGE_NAME,
    version=VERSION,
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    long_description_content_type=LONG_DESC_TYPE,
    author=AUTHOR,
    license=LICENSE,
    author_email=AUTHOR_EMAIL,
    url=URL,
    python_requires=">=3.10",
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Information Analysis",
        "Topic :: Text Processing :: Linguistic",
    ],
)
