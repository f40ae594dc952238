# Copyright 2026 Firefly Software Solutions Inc.
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
"""SimpleMapper Couchbase adapter — scope query and collection key-value helpers.

Requires the ``couchbase`` SDK (``pip install simplemapper[couchbase]``) to
build query options; helpers accept any object with the SDK's scope or
collection interface.
"""

from simplemapper.data.adapters.couchbase.collection import CouchbaseKeyValueAdapter
from simplemapper.data.adapters.couchbase.scope import (
    CouchbaseQueryAdapter,
    default_scope,
    execute,
    query_first,
    query_first_or_default,
    query_options,
    query_single,
    query_to_list,
)

__all__ = [
    "CouchbaseKeyValueAdapter",
    "CouchbaseQueryAdapter",
    "default_scope",
    "execute",
    "query_first",
    "query_first_or_default",
    "query_options",
    "query_single",
    "query_to_list",
]
