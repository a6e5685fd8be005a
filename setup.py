from setuptools import setup, find_namespace_packages

setup(
    name="nsdebug",
    version="0.3.0b0",
    description="Namespaced debug output switched at runtime by a DEBUG spec (wildcards, negation, hot reload)",
    author="Dustin",
    author_email="6962246+djdarcy@users.noreply.github.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=("nsdebug", "nsdebug.*")),
    install_requires=[],
    extras_require={
        "dev": ["pytest>=7.0", "pytest-cov"],
    },
    entry_points={
        "console_scripts": [
            "nsdebug=nsdebug.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Debuggers",
    ],
    python_requires=">=3.10",
)
