# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="filenav",
    version="0.1.0",
    description="In-memory navigable model of a filesystem subtree",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["filenav", "filenav.*"]),
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'filenav=filenav.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
