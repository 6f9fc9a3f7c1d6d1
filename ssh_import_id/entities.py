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

"""SSH key import entities."""

import collections


# <key-type> <base64-blob> [comment]
PublicKeyRecord = collections.namedtuple('PublicKeyRecord',
                                         ['key_type', 'blob', 'comment'])

# text is the normalized authorized_keys text; None unless accepted.
ValidationResult = collections.namedtuple('ValidationResult',
                                          ['accepted', 'records', 'text'])

ImportResult = collections.namedtuple('ImportResult',
                                      ['user_id', 'url', 'succeeded',
                                       'records'])


def line_to_public_key_record(line):
  key_type, _, rest = line.partition(' ')
  blob, _, comment = rest.partition(' ')
  return PublicKeyRecord(key_type, blob, comment)


def json_to_key_lines(json, user_id):
  """Returns one key line per entry, adding a comment to bare keys."""
  lines = []
  for entry in json:
    key = entry['key'].strip()
    if len(key.split()) < 3:
      key = '{} ssh-import-id-{}'.format(key, user_id)
    lines.append(key)
  return tuple(lines)
