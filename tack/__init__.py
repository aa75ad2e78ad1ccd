# Copyright 2015 Rackspace US, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tack."""

from tack import config  # noqa
from tack import dicts  # noqa
from tack import sequences  # noqa
from tack import settings  # noqa
from tack.builder import CollectionBuilder  # noqa
from tack.builder import ListSorter  # noqa
from tack.exceptions import *  # noqa
from tack.__about__ import *  # noqa
