from pathlib import Path

from setuptools import find_packages, setup

root = Path(__file__).parent
readme = root / "README.md"

setup(
    name="crosswire",
    version="0.1.0",
    description="Compile canonical UI component trees into target framework source.",
    long_description=readme.read_text("utf-8") if readme.exists() else "",
    long_description_content_type="text/markdown",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages("src"),
    package_data={"crosswire": ["templates/*.jinja"]},
    include_package_data=True,
    install_requires=[
        "jinja2>=3.0",
        "rich>=13.0",
        "rich-click>=1.7",
        "tree-sitter>=0.23",
        "tree-sitter-javascript>=0.23",
        "watchfiles>=0.20",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["crosswire=crosswire.cli.main:cli"],
    },
    zip_safe=False,
)
