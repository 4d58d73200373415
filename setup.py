# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="diskrank",
    version="0.1.0",
    description="Concurrent scanner that reports the biggest files under a directory tree",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["diskrank", "diskrank.*"]),
    python_requires=">=3.9",
    install_requires=[
        "rich>=13.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        'console_scripts': [
            'diskrank=diskrank.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
