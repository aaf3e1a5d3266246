from setuptools import setup, find_packages
from pathlib import Path
import sys

# Check Python version requirement
if sys.version_info < (3, 9):
    raise RuntimeError("MicroFtps requires Python 3.9 or newer")

setup(
    name="MicroFtps",
    version="1.0.0",
    author="Andrew Hernandez",
    author_email="andromedeyz@hotmail.com",
    description="A minimal synchronous FTPS client: read, list, write and delete files over implicit TLS.",
    long_description=(
        open("README.md", "r", encoding="utf-8").read()
        if Path("README.md").exists()
        else "MicroFtps keeps FTPS out of your way. Give it a server and credentials once, then read files, list directories, upload content and delete files over a TLS-secured connection, with libcurl doing the protocol work."
    ),
    long_description_content_type="text/markdown",
    url="http://github.com/ApaxPhoenix/MicroFtps",
    project_urls={
        "Bug Tracker": "http://github.com/ApaxPhoenix/MicroFtps/issues",
        "Source Code": "http://github.com/ApaxPhoenix/MicroFtps",
    },
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: File Transfer Protocol (FTP)",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: System :: Networking",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pycurl>=7.43.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    keywords="ftps, ftp, tls, ssl, curl, file transfer, client",
    license="MIT",
    zip_safe=False,
)
