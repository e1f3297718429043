"""Setup configuration for viarailmap."""

from setuptools import setup, find_packages

with open("docs/README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="viarailmap",
    version="0.1.0",
    author="Alan Ko",
    description="Live VIA Rail train positions and schedule progress",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/alanko0511/viarail-map",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: System :: Monitoring",
    ],
    python_requires=">=3.9",
    install_requires=[
        "requests>=2.27.0",
        "pydantic>=2.5",
    ],
    extras_require={
        "dev": ["pytest>=6.0", "black", "flake8"],
    },
)
