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

"""Schemas defining valid responses from JSON keyservers."""

# A key must fit on one line of the authorized keys file.
_KEY_STRING_REGEX = '^[^\n]*$'

# GET https://api.github.com/users/{user}/keys
GITHUB_KEYS_SCHEMA = {
    'type': 'array',
    'items': {
        'type': 'object',
        'properties': {
            'id': {'type': 'integer'},
            'key': {'type': 'string', 'pattern': _KEY_STRING_REGEX}
        },
        'required': ['key']
    }
}
