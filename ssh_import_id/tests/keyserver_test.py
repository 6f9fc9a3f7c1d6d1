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


"""Tests for KeyserverClient."""

import re
import tempfile
import unittest

import ssh_import_id
from ssh_import_id import keyserver
from ssh_import_id.keyserver import KeyserverClient
import mock
import requests
import responses

_KEYS_URL = 'https://keys.example.com/alice'
_GITHUB_URL = 'https://api.github.com/users/alice/keys'
_RSA_KEY = 'ssh-rsa AAAAB3NzaC1yc2EAAAADAQABAAABAQDVTRZ9YV alice@example.com'


class ResolveUrlTest(unittest.TestCase):

  def test_unprefixed_uses_template(self):
    self.assertEqual(
        ('https://keys.example.com/~a%20b', keyserver.RAW),
        keyserver.resolve_url('a b', 'https://keys.example.com/~%s'))

  def test_launchpad_prefix(self):
    self.assertEqual(
        ('https://launchpad.net/~alice/+sshkeys', keyserver.RAW),
        keyserver.resolve_url('lp:alice', 'https://keys.example.com/%s'))

  def test_github_prefix(self):
    self.assertEqual(
        (_GITHUB_URL, keyserver.JSON),
        keyserver.resolve_url('gh:alice', 'https://keys.example.com/%s'))

  def test_unknown_prefix_is_part_of_identifier(self):
    self.assertEqual(
        ('https://keys.example.com/xx%3Aalice', keyserver.RAW),
        keyserver.resolve_url('xx:alice', 'https://keys.example.com/%s'))

  def test_prefixed_name_is_encoded(self):
    self.assertEqual(
        ('https://launchpad.net/~..%2Fadmin/+sshkeys', keyserver.RAW),
        keyserver.resolve_url('lp:../admin', 'https://keys.example.com/%s'))


class KeyserverClientTest(unittest.TestCase):

  # pylint: disable=invalid-name
  # assertRaisesMatch matches unittest assert naming (i.e. assertRaisesRegex).
  def assertRaisesMatch(self, e, message):
    return self.assertRaisesRegex(e, re.escape(message))
  # pylint: enable=invalid-name

  @responses.activate
  def test_fetch_raw(self):
    responses.add(responses.GET, _KEYS_URL, body=_RSA_KEY + '\n')
    client = KeyserverClient()
    self.assertEqual(_RSA_KEY + '\n', client.fetch('alice', _KEYS_URL))
    self.assertEqual(1, len(responses.calls))
    self.assertEqual('ssh-import-id',
                     responses.calls[0].request.headers['User-Agent'])

  @responses.activate
  def test_fetch_sends_single_bounded_request(self):
    responses.add(responses.GET, _KEYS_URL, body=_RSA_KEY + '\n')
    client = KeyserverClient(timeout=3)
    session = client._session  # pylint: disable=protected-access
    with mock.patch.object(session, 'get', wraps=session.get) as get_mock:
      client.fetch('alice', _KEYS_URL)
    get_mock.assert_called_once_with(_KEYS_URL, timeout=3, stream=True,
                                     verify=True)

  def test_environment_sanitized_by_default(self):
    client = KeyserverClient()
    self.assertFalse(client._session.trust_env)  # pylint: disable=protected-access

  def test_environment_inherited_on_request(self):
    client = KeyserverClient(sanitize_environment=False)
    self.assertTrue(client._session.trust_env)  # pylint: disable=protected-access

  @responses.activate
  def test_not_found(self):
    responses.add(responses.GET, _KEYS_URL, status=404)
    client = KeyserverClient()
    with self.assertRaisesMatch(ssh_import_id.NotFoundException,
                                'URL not found: [{}]'.format(_KEYS_URL)) as cm:
      client.fetch('alice', _KEYS_URL)
    self.assertEqual('alice', cm.exception.user_id)
    self.assertEqual(_KEYS_URL, cm.exception.url)

  @responses.activate
  def test_server_error(self):
    responses.add(responses.GET, _KEYS_URL, status=500, body='oops')
    client = KeyserverClient()
    with self.assertRaisesMatch(
        ssh_import_id.FetchException,
        'Http error while fetching keys: [{}]'.format(_KEYS_URL)) as cm:
      client.fetch('alice', _KEYS_URL)
    self.assertNotIsInstance(cm.exception, ssh_import_id.NotFoundException)
    self.assertIsInstance(cm.exception.inner_exception, requests.HTTPError)

  @responses.activate
  def test_non_2xx_status(self):
    responses.add(responses.GET, _KEYS_URL, status=304)
    client = KeyserverClient()
    with self.assertRaises(ssh_import_id.FetchException):
      client.fetch('alice', _KEYS_URL)

  @responses.activate
  def test_connection_error(self):
    responses.add(responses.GET, _KEYS_URL,
                  body=requests.ConnectionError('Connection refused'))
    client = KeyserverClient()
    with self.assertRaisesMatch(
        ssh_import_id.FetchException,
        'Error while fetching keys: [{}]'.format(_KEYS_URL)) as cm:
      client.fetch('alice', _KEYS_URL)
    self.assertEqual('alice', cm.exception.user_id)

  @responses.activate
  def test_timeout(self):
    responses.add(responses.GET, _KEYS_URL, body=requests.Timeout())
    client = KeyserverClient()
    with self.assertRaises(ssh_import_id.FetchException) as cm:
      client.fetch('alice', _KEYS_URL)
    self.assertIsInstance(cm.exception.inner_exception, requests.Timeout)

  @responses.activate
  def test_fetch_github_json(self):
    responses.add(
        responses.GET, _GITHUB_URL,
        body='[{"id": 1, "key": "ssh-rsa AAAA alice@a"},'
        ' {"id": 2, "key": "ssh-dss BBBB alice@b"}]')
    client = KeyserverClient()
    self.assertEqual('ssh-rsa AAAA alice@a\nssh-dss BBBB alice@b\n',
                     client.fetch('gh:alice', _GITHUB_URL, keyserver.JSON))

  @responses.activate
  def test_fetch_github_bare_keys_get_comment(self):
    responses.add(
        responses.GET, _GITHUB_URL,
        body='[{"id": 1, "key": "ssh-rsa AAAAB3NzaC1yc2EAAAADAQAB"},'
        ' {"id": 2, "key": "ssh-dss BBBB alice@b"}]')
    client = KeyserverClient()
    self.assertEqual(
        'ssh-rsa AAAAB3NzaC1yc2EAAAADAQAB ssh-import-id-gh:alice\n'
        'ssh-dss BBBB alice@b\n',
        client.fetch('gh:alice', _GITHUB_URL, keyserver.JSON))

  @responses.activate
  def test_fetch_github_invalid_json(self):
    responses.add(responses.GET, _GITHUB_URL, body='[{"key": ')
    client = KeyserverClient()
    with self.assertRaisesMatch(
        ssh_import_id.FetchException,
        'Parsing JSON failed: [{}]'.format(_GITHUB_URL)):
      client.fetch('gh:alice', _GITHUB_URL, keyserver.JSON)

  @responses.activate
  def test_fetch_github_unexpected_json(self):
    responses.add(responses.GET, _GITHUB_URL,
                  body='{"message": "Not Found"}')
    client = KeyserverClient()
    with self.assertRaisesMatch(ssh_import_id.FetchException,
                                'Validating JSON failed'):
      client.fetch('gh:alice', _GITHUB_URL, keyserver.JSON)

  @responses.activate
  def test_fetch_github_multiline_key_rejected(self):
    responses.add(responses.GET, _GITHUB_URL,
                  body='[{"id": 1, "key": "ssh-rsa AAAA\\nssh-rsa BBBB x"}]')
    client = KeyserverClient()
    with self.assertRaises(ssh_import_id.FetchException):
      client.fetch('gh:alice', _GITHUB_URL, keyserver.JSON)

  @responses.activate
  def test_staging_file_released(self):
    responses.add(responses.GET, _KEYS_URL, body=_RSA_KEY + '\n')
    staging_files = []
    real_temporary_file = tempfile.TemporaryFile

    def tracking_temporary_file(*args, **kwargs):
      staging_file = real_temporary_file(*args, **kwargs)
      staging_files.append(staging_file)
      return staging_file

    with mock.patch('ssh_import_id.keyserver.tempfile.TemporaryFile',
                    side_effect=tracking_temporary_file):
      KeyserverClient().fetch('alice', _KEYS_URL)
    self.assertEqual(1, len(staging_files))
    self.assertTrue(staging_files[0].closed)

  def test_staging_file_released_on_error(self):
    response = mock.MagicMock()
    response.__enter__.return_value = response
    response.status_code = 200
    response.iter_content.side_effect = requests.ConnectionError('reset')
    staging_file = mock.MagicMock()
    client = KeyserverClient()
    with mock.patch.object(client._session, 'get',  # pylint: disable=protected-access
                           return_value=response):
      with mock.patch('ssh_import_id.keyserver.tempfile.TemporaryFile',
                      return_value=staging_file):
        with self.assertRaises(ssh_import_id.FetchException):
          client.fetch('alice', _KEYS_URL)
    staging_file.__exit__.assert_called_once()
    response.__exit__.assert_called_once()


if __name__ == '__main__':
  unittest.main()
