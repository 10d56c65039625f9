#!/usr/bin/env python
import sys

import setuptools

if sys.version_info < (3, 11):
    sys.exit('Python < 3.11 is not supported')

install_requirements = [
    'platformdirs',
    'prompt_toolkit>=3',
    'pydantic>=2',
    'pydantic-settings>=2.4',
    'rich',
    'typing_extensions',
]

test_requirements = [
    'inline-snapshot',
    'pytest',
]


def main():
    setuptools.setup(
        name='hostsfile',
        version='1.1.0',
        description='Manage the hosts file from the command line',
        python_requires='>=3.11',
        entry_points={
            'console_scripts': [
                'hostsfile = hostsfile.main:main',
            ],
        },
        install_requires=install_requirements,
        extras_require={
            'test': test_requirements,
        },
        packages=setuptools.find_packages(
            '.', include=('hostsfile', 'hostsfile.*')),
    )


if __name__ == '__main__':
    main()
