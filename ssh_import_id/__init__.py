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

"""Package marker file for the ssh_import_id package."""

import logging

from .exceptions import FetchException
from .exceptions import ImportIdException
from .exceptions import NotFoundException
from .exceptions import StartupException
from .exceptions import ValidationException
from .exceptions import WriteException

from .authorized_keys import AuthorizedKeysWriter
from .authorized_keys import STDOUT
from .importer import KeyImporter
from .keyserver import KeyserverClient
from .validator import validate_keys

logging.getLogger(__name__).addHandler(logging.NullHandler())
