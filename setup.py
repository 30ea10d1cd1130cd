"""
Install fangsearch
"""
from setuptools import setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Define the minimal classes needed to install and run fangsearch
INSTALL_REQUIRES = ["numpy>=1.18", "scipy>=1.10.0", "joblib>=1.2.0"]
# Define all the possible extras needed
EXTRAS_REQUIRE = {}

# Define the packages needed for testing
TESTS_REQUIRE = ["pytest"]
EXTRAS_REQUIRE["test"] = TESTS_REQUIRE
# Define the extras needed for development
EXTRAS_REQUIRE["dev"] = TESTS_REQUIRE

# Run the setup
setup(
    name="fangsearch",
    version="0.1.0",
    packages=["fangsearch", "fangsearch.independence_tests"],
    license="GNU General Public License v3.0",
    description="Fast adjacency search with non-Gaussian pairwise "
                "orientation and two-cycle detection",
    long_description=long_description,
    long_description_content_type="text/markdown",
    keywords="causal inference, causal discovery, non-Gaussian, feedback",
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
    python_requires=">=3.7",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Topic :: Scientific/Engineering :: Mathematics",
        "License "
        ":: OSI Approved "
        ":: GNU General Public License v3 or later (GPLv3+)",
        "Programming Language :: Python",
    ],
)
