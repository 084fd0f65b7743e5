import os, re
from setuptools import setup, find_packages

# Read the README file
with open("README.md") as f:
    proxify_readme = f.read()

def read_file(filepath: str) -> str:
    """Read and return the content of a file."""
    with open(filepath, "r", encoding="utf-8") as f:
        return f.read().strip()

def get_dependencies() -> list:
    """Retrieve dependencies from the requirements file."""
    depfile = "requirements.txt"
    if os.path.exists(depfile):
        return [
            line.strip() for line in read_file(depfile).splitlines()
            if line.strip() and not line.startswith("#")
        ]
    return []

def get_version(package: str) -> str:
    """Retrieve the package version from the version file."""
    versionfile = os.path.join(package, "_version.py")

    if os.path.exists(versionfile):
        verstrline = read_file(versionfile)
        parts = dict(
            re.findall(r"^VERSION_(MAJOR|MINOR|PATCH) = (\d+)", verstrline, re.M)
        )
        if len(parts) == 3:
            return "{MAJOR}.{MINOR}.{PATCH}".format(**parts)
        raise RuntimeError("Unable to find version numbers in '_version.py'.")

    raise FileNotFoundError("Version file '_version.py' not found.")

extras_require = {
    # Development dependencies
    "dev": [
        "pytest>=7.4.0",
        "pytest-cov>=4.1.0",
        "hypothesis>=6.88.0",  # Property-based testing
        "black>=23.0.0",
        "flake8>=6.0.0",
        "pyright>=1.1.0",
    ],

    # Testing dependencies
    "test": [
        "pytest>=7.4.0",
        "pytest-cov>=4.1.0",
        "hypothesis>=6.88.0",
    ],
}

# Setup the package
if __name__ == '__main__':
    setup(
        name="proxify",
        version=get_version("proxify"),
        description="Documentation-driven method interception and argument validation for class trees.",
        long_description=proxify_readme,
        long_description_content_type="text/markdown",
        license="MIT",
        packages=find_packages(include=["proxify", "proxify.*"]),
        install_requires=get_dependencies(),
        extras_require=extras_require,
        python_requires=">=3.8",
        classifiers=[
            "Development Status :: 4 - Beta",
            "Intended Audience :: Developers",
            "License :: OSI Approved :: MIT License",
            "Operating System :: OS Independent",
            "Programming Language :: Python :: 3",
            "Programming Language :: Python :: 3.8",
            "Programming Language :: Python :: 3.9",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.12",
            "Topic :: Software Development :: Libraries :: Python Modules",
            "Topic :: Software Development :: Debuggers",
        ],
        keywords="proxy interception validation documentation pydantic",
        entry_points={
            "console_scripts": [
                "proxify=proxify.__main__:main",
            ],
        },
    )
