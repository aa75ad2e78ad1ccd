# Copyright (c) 2011-2015 Rackspace US, Inc.
# All Rights Reserved.
#    Licensed under the Apache License, Version 2.0 (the "License"); you may
#    not use this file except in compliance with the License. You may obtain
#    a copy of the License at
#
#         http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
#    WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
#    License for the specific language governing permissions and limitations
#    under the License.

"""Typed access to configuration values.

A :class:`Settings` object wraps a configuration provider and is passed
explicitly to whatever needs configuration; there is no process-wide
instance. A provider is any mapping. Keys are `:` delimited paths which are
looked up either as flat keys (`{'Tack:Odbc:DataSource': 'DSN1'}`, as
produced by :meth:`tack.config.Config.from_ini`) or by walking nested
mappings (`{'Tack': {'Odbc': {'DataSource': 'DSN1'}}}`).

    from tack import config
    from tack import settings

    app_settings = settings.Settings(config.Config.from_ini(['app.ini']))
    timeout = app_settings.get_as('Tack:Odbc:Timeout', int, default=30)
    hosts = app_settings.get_array('App:Hosts')
"""

import datetime
import decimal
import enum

from tack import config
from tack import dicts
from tack import exceptions
from tack import log
from tack import sequences

LOG = log.getLogger(__name__)

SEPARATOR = config.KEY_SEPARATOR

TRUE_STRINGS = ('true', 't', 'yes', 'y', 'on', '1')
FALSE_STRINGS = ('false', 'f', 'no', 'n', 'off', '0')


def parse_bool(value):
    """Parse common textual booleans (case-insensitive)."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_STRINGS:
        return True
    if text in FALSE_STRINGS:
        return False
    raise ValueError("'%s' is not a recognized boolean" % value)


def _parse_datetime(value):
    if isinstance(value, datetime.datetime):
        return value
    return datetime.datetime.fromisoformat(str(value).strip())


def _parse_date(value):
    if isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(str(value).strip())


def _parse_decimal(value):
    try:
        return decimal.Decimal(str(value).strip())
    except decimal.InvalidOperation:
        raise ValueError("'%s' is not a decimal number" % value)


CONVERTERS = {
    str: str,
    bool: parse_bool,
    int: lambda value: int(str(value).strip()),
    float: lambda value: float(str(value).strip()),
    decimal.Decimal: _parse_decimal,
    datetime.datetime: _parse_datetime,
    datetime.date: _parse_date,
}


def convert(value, type_, ignore_case=False):
    """Convert a raw configuration value to `type_`.

    :raises UnsupportedConversionError: when no converter exists for `type_`
    :raises ValueError: when `value` cannot be parsed
    """
    if isinstance(type_, type) and issubclass(type_, enum.Enum):
        if isinstance(value, type_):
            return value
        name = str(value).strip()
        if ignore_case:
            for member in type_:
                if member.name.lower() == name.lower():
                    return member
        try:
            return type_[name]
        except KeyError:
            raise ValueError("'%s' is not a member of %s"
                             % (value, type_.__name__))
    if type_ is str and isinstance(value, str):
        return value
    if type_ in CONVERTERS:
        return CONVERTERS[type_](value)
    raise exceptions.UnsupportedConversionError(
        "No conversion to %s is available; pass parse=<callable>"
        % getattr(type_, '__name__', type_))


class Settings(object):

    """Configuration accessor over an explicitly supplied provider.

    :param provider: a mapping of configuration values, or a callable
        returning one (evaluated on every access)
    """

    not_loaded_message = ("Configuration provider not loaded: try "
                          "Settings(<mapping>) or settings.load(<mapping>)")

    def __init__(self, provider=None):
        self._provider = provider

    def __repr__(self):
        return '<Settings loaded=%s>' % self.is_loaded()

    def load(self, provider):
        """Replace the configuration provider."""
        self._provider = provider
        return self

    @property
    def provider(self):
        """The current provider mapping (or `None`)."""
        if callable(self._provider):
            return self._provider()
        return self._provider

    def is_loaded(self):
        """Check whether a provider is available."""
        return self.provider is not None

    def _require_provider(self):
        provider = self.provider
        if provider is None:
            raise exceptions.NoConfigurationError(self.not_loaded_message)
        return provider

    def _lookup(self, key):
        provider = self._require_provider()
        if key in provider:
            return provider[key]
        if SEPARATOR not in key:
            return None
        if not isinstance(provider, dict):
            provider = dict(provider)
        return dicts.read_path(provider, key, separator=SEPARATOR)

    def get(self, key, required=False):
        """Return the raw value for `key` (`None` if absent).

        :raises RequiredConfigError: if `required` and the key is absent
        :raises NoConfigurationError: if no provider has been loaded
        """
        value = self._lookup(key)
        if value is None and required:
            raise exceptions.RequiredConfigError(key)
        return value

    def has(self, key):
        """Check whether `key` has a value."""
        return self.get(key) is not None

    def get_as(self, key, type_=str, parse=None, ignore_case=False,
               required=False, suppress_errors=False, default=None):
        """Return the value for `key` converted to `type_`.

        :keyword parse: optional callable that converts the raw value,
            taking precedence over `type_`
        :keyword ignore_case: match Enum member names case-insensitively
        :keyword suppress_errors: return `default` instead of raising
            ConfigParseError when the value cannot be converted
        :keyword default: returned when the key is absent
        :raises ConfigParseError: if the value cannot be converted
        :raises UnsupportedConversionError: if `type_` has no converter
        """
        value = self.get(key, required=required)
        if value is None:
            return default
        if isinstance(value, str) and not value.strip() and type_ is not str:
            return default
        try:
            if parse is not None:
                return parse(value)
            return convert(value, type_, ignore_case=ignore_case)
        except exceptions.UnsupportedConversionError:
            raise
        except (TypeError, ValueError) as exc:
            if suppress_errors:
                LOG.debug("Suppressed error parsing '%s': %s", key, exc)
                return default
            raise exceptions.ConfigParseError(key, value, type_,
                                              reason=str(exc))

    def get_array(self, key, delimiter=',', required=False):
        """Split a delimited value into a list of zapped, non-blank strings.

        Values that are already lists are zapped and pruned as well.
        """
        value = self.get(key, required=required)
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(delimiter)
        return sequences.zap_all(value,
                                 prune_options=sequences.PruneOptions.ALL)

    def get_typed_array(self, key, type_, delimiter=',', required=False,
                        ignore_case=False):
        """Like :meth:`get_array`, converting each element to `type_`."""
        converted = []
        for index, item in enumerate(self.get_array(key, delimiter=delimiter,
                                                    required=required)):
            try:
                converted.append(convert(item, type_,
                                         ignore_case=ignore_case))
            except exceptions.UnsupportedConversionError:
                raise
            except (TypeError, ValueError) as exc:
                raise exceptions.ConfigParseError(
                    '%s[%d]' % (key, index), item, type_, reason=str(exc))
        return converted

    def get_section(self, path, required=False):
        """Return the values below `path` as a nested dict.

        :raises RequiredConfigError: if `required` and nothing is found
        """
        provider = self._require_provider()
        prefix = path.strip(SEPARATOR) + SEPARATOR
        section = {}
        for key, value in provider.items():
            if isinstance(key, str) and key.startswith(prefix):
                dicts.write_path(section, key[len(prefix):], value,
                                 separator=SEPARATOR)
        nested = self._lookup(path.strip(SEPARATOR))
        if isinstance(nested, dict):
            section = dicts.combine(nested, section)
        if not section:
            if required:
                raise exceptions.RequiredConfigError(path)
            return None
        return section

    def parse_section(self, path, cls=None, required=False):
        """Build an object from the values below `path`.

        :param cls: a class (or factory) called with the section's values as
            keyword arguments; when omitted the section dict is returned
        :raises RequiredConfigError: if `required` and nothing is found
        """
        section = self.get_section(path, required=required)
        if section is None or cls is None:
            return section
        try:
            return cls(**section)
        except TypeError as exc:
            raise exceptions.ConfigParseError(path, section, cls,
                                              reason=str(exc))

    def get_connection_string(self, name, required=False):
        """Return the connection string named `name`.

        Looks up `ConnectionStrings:<name>`.
        """
        return self.get(SEPARATOR.join(('ConnectionStrings', name)),
                        required=required)
