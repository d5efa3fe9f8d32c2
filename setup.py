# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="tinymerge",
    version="0.1.0",
    description="Merge two tiny v1 mapping files into a single multi-namespace mapping",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["tinymerge", "tinymerge.*"]),
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'tinymerge=tinymerge.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
