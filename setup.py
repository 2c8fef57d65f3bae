from setuptools import setup, find_packages

setup(
    name="tracesim",
    version="0.1",
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'numpy',
        'matplotlib'
    ],
    extras_require={
        'tests': ['pytest'],
    },
    entry_points={
        'console_scripts': ['tracesim=tracesim.cli:main'],
    },
)
