from setuptools import find_packages, setup
from statsdlite import __version__

import os

setup(
    name="statsdlite",
    version=os.getenv("VERSION") or __version__,
    zip_safe=False,
    packages=find_packages(exclude=["test"]),
    python_requires=">=3.9",
    extras_require={
        "test": [
            "pytest",
        ],
    },
    install_requires=[],
    dependency_links=[],
    package_data={},
    data_files=[],
    entry_points={
        "console_scripts": [
            "statsdlite = statsdlite.__main__:main",
        ],
    },
    description="StatsD client with multi-metric packet buffering",
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "Topic :: System :: Monitoring",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
