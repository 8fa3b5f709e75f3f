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

"""Routing engine.

This package implements Kestrel's URI template compiler, path matching and
parameter binding, reverse routing, and the priority-ordered router built
on top of them.
"""

from kestrel.routing.converters import BaseConverter
from kestrel.routing.converters import BoolConverter
from kestrel.routing.converters import ConverterRegistry
from kestrel.routing.converters import DateTimeConverter
from kestrel.routing.converters import EnumConverter
from kestrel.routing.converters import ReversibleConverter
from kestrel.routing.converters import UUIDConverter
from kestrel.routing.inference import Char
from kestrel.routing.inference import classify
from kestrel.routing.inference import ParamKind
from kestrel.routing.inference import regex_for
from kestrel.routing.params import bind
from kestrel.routing.params import BindResult
from kestrel.routing.params import ParamDict
from kestrel.routing.params import ParamSink
from kestrel.routing.reverse import evaluate
from kestrel.routing.reverse import ReverseBuilder
from kestrel.routing.route import Route
from kestrel.routing.route import RouteBuilder
from kestrel.routing.router import RouteMatch
from kestrel.routing.router import Router
from kestrel.routing.router import RouterOptions
from kestrel.routing.template import compile_template
from kestrel.routing.template import CompiledTemplate
