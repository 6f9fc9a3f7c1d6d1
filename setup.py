# Copyright 2015 Google Inc. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Package setup file."""

from setuptools import setup

setup(name='ssh_import_id',
      version='0.1',
      description='Authorize users by importing their public SSH keys from '
      'a keyserver.',
      url='',
      author='',
      author_email='',
      license='Apache 2.0',
      packages=['ssh_import_id'],
      scripts=[
          'bin/import_ssh_keys.py'
      ],
      python_requires='>=3.6',
      install_requires=[
          'jsonschema',
          'requests',
          'simplejson'
      ],
      extras_require={
          'test': [
              'mock',
              'pytest',
              'responses'
          ]
      },
      zip_safe=False)
