# -*- coding: utf-8 -*-
import setuptools
import pathlib
import site
import sys

# odd bug with develop (editable) installs, see: https://github.com/pypa/pip/issues/7953
site.ENABLE_USER_SITE = "--user" in sys.argv[1:]

required = [
    "pyvisa",
    "pyvisa_py",
    "loguru",
    "mashumaro",
    "click>=8.0.0",
    "click-option-group",
]

extras = {
    "test": ["pytest"],
    "dev": ["pytest", "doit", "ruff"],
}

here = pathlib.Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

# Read version
version = {}
with open("src/k2000/_version.py", "r") as f:
    exec(f.read(), version)

if __name__ == "__main__":
    setuptools.setup(
        name="k2000",
        version=version["__version__"],
        author="Joerg Hau",
        description="Data acquisition using the Keithley 2000 DMM over GPIB.",
        long_description=long_description,
        long_description_content_type="text/markdown",
        keywords=[
            "Keithley",
            "DMM",
            "GPIB",
            "SCPI",
            "data logging",
        ],
        classifiers=[
            "License :: OSI Approved :: GNU General Public License v2 (GPLv2)",
            "Operating System :: POSIX",
            "Development Status :: 4 - Beta",
        ],
        license="GPL-2.0-only",
        package_dir={"": "src"},
        packages=setuptools.find_packages(
            where="src",
            exclude=["*.test", "*.test.*", "test.*", "test", "test_*"],
        ),
        entry_points={
            "console_scripts": [
                "k2000=k2000.cli:cli",
            ],
        },
        install_requires=required,
        extras_require=extras,
        python_requires=">= 3.11",
    )
