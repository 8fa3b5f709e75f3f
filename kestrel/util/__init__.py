# Copyright 2013 by Rackspace Hosting, Inc.
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

"""General utilities.

This package includes the URI encoding helpers and the handler
introspection functions used by the routing engine.
"""

from kestrel.util import uri
from kestrel.util.misc import get_declared_params
from kestrel.util.misc import Parameter
from kestrel.util.misc import resolve_param_type
from kestrel.util.misc import unwrap_optional
