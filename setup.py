# Copyright DataStax, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from setuptools import setup

from cassbind import __version__

long_description = ""
with open("README.rst") as f:
    long_description = f.read()


def run_setup():

    dependencies = ['PyYAML', 'thrift']

    setup(
        name='cassbind',
        version=__version__,
        description='Keyspace-level binding over the Cassandra Thrift client interface',
        long_description=long_description,
        packages=['cassbind'],
        keywords='cassandra,thrift,keyspace',
        include_package_data=True,
        install_requires=dependencies,
        extras_require={
            'test': ['pytest', 'mock'],
        },
        python_requires='>=3.6',
        classifiers=[
            'Development Status :: 4 - Beta',
            'Intended Audience :: Developers',
            'License :: OSI Approved :: Apache Software License',
            'Natural Language :: English',
            'Operating System :: OS Independent',
            'Programming Language :: Python',
            'Programming Language :: Python :: 3',
            'Programming Language :: Python :: Implementation :: CPython',
            'Topic :: Software Development :: Libraries :: Python Modules'
        ])

run_setup()
