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

"""Encodes untrusted user identifiers for substitution into keyserver URLs."""

from urllib import parse

URL_PLACEHOLDER = '%s'


def _to_bytes(user_id):
  # Undecodable command line bytes arrive as surrogate escapes.
  try:
    return user_id.encode('utf-8', 'surrogateescape')
  except UnicodeEncodeError:
    return user_id.encode('utf-8', 'surrogatepass')


def quote_identifier(user_id):
  """Percent-encodes every byte of user_id outside [A-Za-z0-9._~-].

  Bytes that were not valid UTF-8 on the command line are encoded as the
  original bytes. Never fails.
  """
  return parse.quote(_to_bytes(user_id), safe='')


def build_url(url_template, user_id):
  """Returns url_template with its placeholder replaced by the quoted id."""
  return url_template.replace(URL_PLACEHOLDER, quote_identifier(user_id), 1)
