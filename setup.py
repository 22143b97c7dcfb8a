from setuptools import setup, find_namespace_packages

setup(
    name="othello-engine",
    version="0.1",
    packages=find_namespace_packages(include=["src", "src.*"]),
    install_requires=[
        'numpy>=1.19.0',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    python_requires='>=3.7',
)
