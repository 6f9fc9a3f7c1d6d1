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

"""Strict syntactic validation of keyserver responses.

A response is accepted only as a whole. The text is normalized line by line:

  1. Blank lines and lines beginning with a carriage return are dropped.
  2. Lines not starting with 'ssh-' continue the previous line, so base64
     blobs wrapped by the keyserver are joined back together.
  3. Characters outside [A-Za-z0-9@: ./=+-] are removed.
  4. Each 'ssh-' line is followed by a blank separator and a trailing blank
     line, so every key occupies exactly three lines.

The normalized text is accepted iff it is non-empty and three times the
number of lines matching KEY_LINE_REGEX equals the total number of lines.

Because of step 2, a key followed by lines of garbage not starting with
'ssh-' is not rejected: the garbage is folded into the key's comment. Only
garbage before the first key, or a malformed 'ssh-' line, rejects the
response.
"""

import logging
import re

from . import entities

KEY_PREFIX = 'ssh-'
# Only rsa and dss keys are counted, so other 'ssh-' key types (ed25519,
# ecdsa) are always rejected.
KEY_LINE_REGEX = r'^ssh-(rsa|dss) [A-Za-z0-9: ./=+-]+ '
_DISALLOWED_CHARS_REGEX = r'[^A-Za-z0-9@: ./=+-]'
_LINES_PER_KEY = 3

# Line joining states.
_SEEK_KEY_START = 'SEEK_KEY_START'
_ACCUMULATE_CONTINUATION = 'ACCUMULATE_CONTINUATION'

_logger = logging.getLogger(__name__)
_key_line_regex = re.compile(KEY_LINE_REGEX)
_disallowed_chars_regex = re.compile(_DISALLOWED_CHARS_REGEX)


def _drop_blank_lines(raw_text):
  for line in raw_text.split('\n'):
    if line and not line.startswith('\r'):
      yield line


def _join_continuations(lines):
  """Joins every line not starting with KEY_PREFIX onto the previous one."""
  state = _SEEK_KEY_START
  current = None
  for line in lines:
    line = line.replace('\r', '')
    if state == _ACCUMULATE_CONTINUATION and not line.startswith(KEY_PREFIX):
      current += line
      continue
    if current is not None:
      yield current
    current = line
    state = _ACCUMULATE_CONTINUATION
  if current is not None:
    yield current


def _separate_keys(lines):
  for line in lines:
    yield line
    if line.startswith(KEY_PREFIX):
      for _ in range(_LINES_PER_KEY - 1):
        yield ''


def normalize(raw_text):
  """Returns the list of normalized lines for raw_text."""
  joined = _join_continuations(_drop_blank_lines(raw_text))
  filtered = (_disallowed_chars_regex.sub('', line) for line in joined)
  return list(_separate_keys(filtered))


def validate_keys(raw_text):
  """Validates a keyserver response.

  Args:
    raw_text: The unvalidated response body.

  Returns:
    An entities.ValidationResult. If the response is accepted, it carries
    a PublicKeyRecord per key and the normalized text to append to the
    authorized keys file. Otherwise records is empty and text is None.
  """
  lines = normalize(raw_text)
  key_lines = [line for line in lines if _key_line_regex.match(line)]
  _logger.debug('Validated [%d] lines, [%d] keys.', len(lines),
                len(key_lines))
  if not lines or _LINES_PER_KEY * len(key_lines) != len(lines):
    return entities.ValidationResult(accepted=False, records=(), text=None)
  records = tuple(entities.line_to_public_key_record(line)
                  for line in key_lines)
  text = ''.join(line + '\n' for line in lines)
  return entities.ValidationResult(accepted=True, records=records, text=text)
