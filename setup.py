# Licensed to Elasticsearch B.V. under one or more contributor
# license agreements. See the NOTICE file distributed with
# this work for additional information regarding copyright
# ownership. Elasticsearch B.V. licenses this file to you under
# the Apache License, Version 2.0 (the "License"); you may
# not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# 	http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.

import re
from os.path import dirname, join

try:
    from setuptools import find_packages, setup
except ImportError:
    print("*** Could not find setuptools. Did you install pip3? *** \n\n")
    raise


def str_from_file(name):
    with open(join(dirname(__file__), name)) as f:
        return f.read().strip()


raw_version = str_from_file("esprovider/_version.py")
version = re.match(r'__version__ = "(.+)"', raw_version).group(1)

# tuples of (major, minor) of supported Python versions ordered from lowest to highest
supported_python_versions = [(3, 10), (3, 11), (3, 12)]

install_requires = [
    # License: Apache 2.0
    # transitive dependencies:
    #   urllib3: MIT
    "elasticsearch>=8.6,<9",
    # License: Apache 2.0
    "elastic-transport>=8.4,<9",
    "urllib3>=1.26.9",
    # always use the latest version, these are certificate files...
    # License: MPL 2.0
    "certifi",
    # License: Apache 2.0
    "ecs-logging>=2.0",
]

tests_require = [
    "pytest>=7",
    "pytest-httpserver>=1.0.4",
]

# These packages are only required when developing the provider
develop_require = [
    "nox",
    "pylint",
    "black",
    "isort",
    "wheel",
]

python_version_classifiers = ["Programming Language :: Python :: {}.{}".format(major, minor) for major, minor in supported_python_versions]

first_supported_version = "{}.{}".format(supported_python_versions[0][0], supported_python_versions[0][1])

setup(
    name="esprovider",
    version=version,
    description="Declarative management of Elasticsearch administrative resources (licenses, security users)",
    long_description=str_from_file("README.md"),
    long_description_content_type="text/markdown",
    license="Apache License, Version 2.0",
    packages=find_packages(where=".", include=("esprovider", "esprovider.*")),
    include_package_data=True,
    python_requires=">={}".format(first_supported_version),
    package_data={"esprovider": ["resources/*.json"]},
    install_requires=install_requires,
    tests_require=tests_require,
    extras_require={"test": tests_require, "develop": tests_require + develop_require},
    classifiers=[
        "Topic :: System :: Systems Administration",
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: Apache Software License",
        "Intended Audience :: Developers",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: POSIX",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
    ]
    + python_version_classifiers,
    zip_safe=False,
)
