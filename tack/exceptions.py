# Copyright (c) 2011-2015 Rackspace US, Inc.
#
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
"""Tack exceptions and warnings.

Warnings can be imported and subsequently disabled by
calling the disable() classmethod.

Errors raised by database drivers are never wrapped by tack; they propagate
to the caller unchanged.
"""

import warnings

__all__ = (
    'DependencyRequiredWarning',
    'TackException',
    'ValidationError',
    'SizeConflictError',
    'CollectionLengthError',
    'DuplicateKeyError',
    'BuilderStateError',
    'ConfigError',
    'ConfigUnknownOption',
    'NoConfigurationError',
    'RequiredConfigError',
    'ConfigParseError',
    'UnsupportedConversionError',
)


class DependencyRequiredWarning(RuntimeWarning):

    """An optional dependency could not be imported."""

    template = ("Module '{import_string}' requires '{requirement}' for "
                "some functionality. ({from_exc})")

    @classmethod
    def format_msg(cls, import_string=None, requirement=None, from_exc=None):
        """Build the warning message for a failed optional import."""
        return cls.template.format(import_string=import_string,
                                   requirement=requirement,
                                   from_exc=from_exc)

    @classmethod
    def disable(cls):
        """Disable warnings of this type."""
        return warnings.simplefilter('ignore', cls)

    @classmethod
    def filter(cls, requirement):
        """Disable warnings of this type for a single requirement."""
        return warnings.filterwarnings(
            'ignore', message=r".*requires '%s'" % requirement,
            category=cls)


class TackException(Exception):

    """Base exception for all exceptions raised by the tack package."""


class ValidationError(TackException, ValueError):

    """An argument failed validation (e.g. a negative size)."""


class SizeConflictError(ValidationError):

    """A collection already exceeds the size it may not exceed."""


class CollectionLengthError(TackException):

    """Two collections expected to share a length do not."""

    def __init__(self, control_length, compare_length):
        """Customize Exception Constructor."""
        super(CollectionLengthError, self).__init__()
        self.control_length = control_length
        self.compare_length = compare_length

    def __str__(self):
        """Include custom data in string."""
        return ("Collection lengths differ after distinct reduction: "
                "%d != %d" % (self.control_length, self.compare_length))


class DuplicateKeyError(TackException, KeyError):

    """A key collision occurred where collisions are not permitted."""

    def __init__(self, key):
        """Customize Exception Constructor."""
        super(DuplicateKeyError, self).__init__(key)
        self.key = key

    def __str__(self):
        """Include custom data in string."""
        return "Duplicate key: %r" % (self.key,)


class BuilderStateError(TackException):

    """A collection builder was modified after it was rendered."""


class ConfigError(TackException):

    """Errors raised by tack/config and tack/settings."""


class ConfigUnknownOption(ConfigError):

    """An option defined in the specified source has no match.

    For example, a specified ini file has an option with no corresponding
    config.Option.
    """


class NoConfigurationError(ConfigError):

    """No configuration provider has been loaded."""


class RequiredConfigError(ConfigError, KeyError):

    """A required configuration key or section is missing."""

    def __init__(self, key):
        """Customize Exception Constructor."""
        super(RequiredConfigError, self).__init__(key)
        self.key = key

    def __str__(self):
        """Include custom data in string."""
        return "Required configuration not found: %s" % self.key


class ConfigParseError(ConfigError, ValueError):

    """A configuration value could not be converted to the requested type."""

    def __init__(self, key, value, type_, reason=None):
        """Customize Exception Constructor."""
        super(ConfigParseError, self).__init__(key, value)
        self.key = key
        self.value = value
        self.type = type_
        self.reason = reason

    def __str__(self):
        """Include custom data in string."""
        msg = ("Unable to parse '%s' (value %r) as %s"
               % (self.key, self.value, getattr(self.type, '__name__',
                                                self.type)))
        if self.reason:
            msg = '%s: %s' % (msg, self.reason)
        return msg


class UnsupportedConversionError(ConfigError, TypeError):

    """No conversion is available for the requested type."""
