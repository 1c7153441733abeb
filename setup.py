#!/usr/bin/env python
"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import re
from pathlib import Path

from setuptools import find_packages, setup

# read without importing the package, its dependencies may not be installed yet
version_file = Path(__file__).parent / 'contract_state' / 'version.py'
__version__ = re.search(r"^BASE_VERSION = '([^']+)'", version_file.read_text(), re.M).group(1)

install_requires = [
    'colorama>=0.4',
    'configargparse>=1.5',
    'pydantic>=2.0,<3',
    'pyyaml>=6.0',
    'structlog>=22.3',
    'typing_extensions>=4.8',
]

setup(
    name='contract-state',
    version=__version__,
    description='State blob encoding and decoding for stateful smart contracts',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache License 2.0',
    python_requires='>=3.10',
    entry_points={
        'console_scripts': ['contract-state=contract_state_cli.main:main'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    packages=find_packages(include=('contract_state', 'contract_state.*', 'contract_state_cli')),
    package_data={'contract_state.conf': ['*.yml']},
    install_requires=install_requires,
    extras_require={
        'tests': ['pytest>=7.0'],
    },
)
