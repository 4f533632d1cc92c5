"""Setuptools magic to install seqfeat."""
import os

from setuptools import setup, find_namespace_packages


def read(fname):
    """Read a file from the current directory."""
    with open(os.path.join(os.path.dirname(__file__), fname), encoding="utf-8") as handle:
        return handle.read()


long_description = read('README.md')

install_requires = [
    'biopython >= 1.80',
]

tests_require = [
    'pytest >= 7.2.0',
    'coverage',
    'pylint >= 3.0.2',
    'mypy >= 0.982',  # for consistent type checking
]


def read_version():
    """Read the version from the appropriate place in the library."""
    with open(os.path.join(os.path.dirname(__file__), 'seqfeat', 'main.py'), 'r', encoding="utf-8") as handle:
        for line in handle:
            if line.startswith('__version__'):
                return line.split('=')[-1].strip().strip('"')
    raise ValueError("unable to find version")


setup(
    name="seqfeat",
    python_requires='>=3.9',
    version=read_version(),
    packages=find_namespace_packages(include=["seqfeat", "seqfeat.*"]),
    package_data={
        'seqfeat': ['config/default.cfg', 'config/test/data/*.cfg'],
    },
    author='seqfeat development team',
    description='Parsing and transformation of EMBL and GenBank feature tables.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    install_requires=install_requires,
    tests_require=tests_require,
    entry_points={
        'console_scripts': [
            'seqfeat=seqfeat.__main__:entrypoint',
        ],
    },
    license='GNU Affero General Public License v3 or later (AGPLv3+)',
    classifiers=[
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Bio-Informatics',
        'License :: OSI Approved :: GNU Affero General Public License v3 or later (AGPLv3+)',
        'Operating System :: OS Independent',
    ],
    extras_require={
        'testing': tests_require,
    },
)
