#!/usr/bin/env python
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from setuptools import setup

setup(name='callcount',
      version='0.0.1',
      py_modules=['callcount', 'stubout'],
      python_requires='>=3.6',
      license='Apache License, Version 2.0',
      description='Call counting mocks with declarative call patterns',
      long_description='''Callcount wraps a stub function in a mock that
counts its invocations and checks the count against an expected call pattern
(none, any number, at least n, at most n, exactly n).''',
      )
