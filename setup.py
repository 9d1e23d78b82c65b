import os
from setuptools import setup, find_packages


def read_version():
    path = os.path.join(os.path.dirname(__file__), "haploedge", "_version.py")
    with open(path) as f:
        namespace = {}
        exec(f.read(), namespace)
    return namespace["version"]


install_requires = [
    "pysam>=0.18.0",
    "networkx",
    "xopen>=1.2.0",
]

setup(
    name="haploedge",
    version=read_version(),
    description="Overlap graph edges between reads of viral quasispecies",
    packages=find_packages(include=["haploedge", "haploedge.*"]),
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["haploedge = haploedge.__main__:main"]},
)
