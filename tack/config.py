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
#
# pylint: disable=W0212

r"""Configuration Parser.

Configurable parser that will parse config files, environment variables,
keyring, and command-line arguments. A parsed :class:`Config` is a plain
mapping and can be handed to :class:`tack.settings.Settings` as its provider.

Example app.ini file:

    [app]
    timeout = 50
    dsn = WAREHOUSE

Example app.py file:

    from tack import config
    from tack import settings

    options = [
        config.Option("--timeout",
                      help="query timeout in seconds",
                      default=30,
                      type=int,
                      env="APP_TIMEOUT"),
        config.Option("--dsn",
                      help="ODBC data source name",
                      dest="Tack:Odbc:DataSource"),
    ]
    conf = config.Config(prog='app', options=options,
                         ini_paths=['/etc/app.ini'])
    conf.parse()

    app_settings = settings.Settings(conf)
    app_settings.get_as('timeout', int)

To expose *every* value in an ini file (not just the declared options), use
:meth:`Config.from_ini`; each `[section] option` becomes a `section:option`
key.

Sources are layered lowest to highest: defaults, ini files, keyring,
environment, command line.
"""

import argparse
import collections.abc
import configparser
import copy
import logging
import os
import sys

try:
    import keyring
except ImportError:
    keyring = None  # pylint: disable=C0103

from tack import exceptions

LOG = logging.getLogger(__name__)

KEY_SEPARATOR = ':'


class Option(object):

    """Holds a configuration option and the names and locations for it.

    Instantiate options using the same arguments as you would for an
    add_arguments call in argparse. However, you have three additional kwargs
    available:

        env: the name of the environment variable to use for this option
        ini_section: the ini file section to look this value up from
        group: the name of the option/argument group used to organize the
               help/usage output
    """

    def __init__(self, *args, **kwargs):
        """Initialize options."""
        self.args = args or []
        self.kwargs = kwargs or {}

    def __copy__(self):
        """Implement copy."""
        return type(self)(*copy.copy(self.args), **copy.copy(self.kwargs))

    def __repr__(self):
        """Customize repr to show option args and kwargs."""
        args = ', '.join(self.args)
        kwrgs = ', '.join(['%s=%s' % (k, v) for k, v in self.kwargs.items()])
        rpr = 'Option(%s' % args
        if kwrgs:
            rpr = '%s, %s' % (rpr, kwrgs)
        rpr = '%s)' % rpr
        return rpr

    def add_argument(self, parser, permissive=False, **override_kwargs):
        """Add an option to a an argparse parser.

        :keyword permissive: when true, build a parser that does not validate
            required arguments.
        """
        kwargs = copy.copy(self.kwargs)
        if 'env' in kwargs and 'help' in kwargs:
            kwargs['help'] = "%s (or set %s)" % (kwargs['help'],
                                                 kwargs['env'])
        if permissive:
            kwargs.pop('required', None)
        kwargs.pop('env', None)
        kwargs.pop('ini_section', None)
        groupname = kwargs.pop('group', None)
        kwargs.update(override_kwargs)
        target = parser
        if groupname:
            exists = [grp for grp in parser._action_groups
                      if grp.title == groupname]
            target = exists[0] if exists else parser.add_argument_group(
                title=groupname)
        return target.add_argument(*self.args, **kwargs)

    @property
    def type(self):
        """The type of the option.

        Should be a callable to parse options.
        """
        return self.kwargs.get("type", str)

    @property
    def name(self):
        """The name of the option as determined from the args."""
        for arg in self.args:
            if arg.startswith("--"):
                return arg[2:].replace("-", "_")
            elif arg.startswith("-"):
                continue
            else:
                return arg.replace("-", "_")

    @property
    def dest(self):
        """The destination name of the option as determined from the args."""
        if 'dest' in self.kwargs:
            return self.kwargs['dest']
        return self.name

    @property
    def default(self):
        """The default for the option."""
        return self.kwargs.get("default")


class Config(collections.abc.MutableMapping):

    """Parses configuration sources."""

    def __init__(self, options=None, ini_paths=None, argv=None, prog=None,
                 **parser_kwargs):
        """Initialize with list of options.

        :param ini_paths: optional paths to ini files to look up values from
        :param parser_kwargs: kwargs used to init argparse parsers.
        :param argv: argument strings (defaults to sys.argv)
        """
        self._parser_kwargs = parser_kwargs or {}
        if prog:
            self._parser_kwargs['prog'] = prog
        self._ini_paths = list(ini_paths or [])
        self._options = copy.copy(options) or []
        self._values = {option.dest: option.default
                        for option in self._options}
        self._argv = argv
        self._prog = prog
        self.ini_config = None
        self.pass_thru_args = []

    @classmethod
    def init(cls, *args, **kwargs):
        """Initialize the config like as you would a regular dict."""
        instance = cls()
        instance._values.update(dict(*args, **kwargs))
        return instance

    @classmethod
    def from_ini(cls, paths, **kwargs):
        """Load every value from ini files as `section:option` keys.

        Later paths override earlier ones.
        """
        instance = cls(ini_paths=paths, **kwargs)
        parser = configparser.ConfigParser(interpolation=None)
        parser.optionxform = str  # keep key case
        read = parser.read(paths)
        LOG.debug("Loaded ini files: %s", read)
        for section in parser.sections():
            for option, value in parser.items(section):
                instance._values[KEY_SEPARATOR.join((section, option))] = value
        instance.ini_config = parser
        return instance

    @property
    def prog(self):
        """Program name."""
        if not self._prog:
            self._prog = os.path.basename(sys.argv[0]) or 'tack'
        return self._prog

    @prog.setter
    def prog(self, value):
        """Set program name."""
        self._prog = value

    @property
    def default_ini(self):
        """Default ini file name."""
        return '%s.ini' % self.prog

    def __getitem__(self, key):
        """Get item from config."""
        return self._values[key]

    def __setitem__(self, key, value):
        """Set item in config."""
        self._values[key] = value

    def __delitem__(self, key):
        """Delete item from config."""
        del self._values[key]

    def __iter__(self):
        """Iterate config."""
        return iter(self._values)

    def __len__(self):
        """Check number of config options."""
        return len(self._values)

    def __getattr__(self, attr):
        """Get attribute."""
        if attr.startswith('_'):
            raise AttributeError(attr)
        if attr in self._values:
            return self._values[attr]
        raise AttributeError("'config' object has no attribute '%s'" % attr)

    def build_parser(self, options, permissive=False, **override_kwargs):
        """Construct an argparser from supplied options.

        :keyword override_kwargs: keyword arguments to override when calling
            parser constructor.
        :keyword permissive: when true, build a parser that does not validate
            required arguments.
        """
        kwargs = copy.copy(self._parser_kwargs)
        kwargs.setdefault('formatter_class',
                          argparse.ArgumentDefaultsHelpFormatter)
        kwargs.update(override_kwargs)
        if 'fromfile_prefix_chars' not in kwargs:
            kwargs['fromfile_prefix_chars'] = '@'
        parser = argparse.ArgumentParser(**kwargs)
        for option in options or []:
            option.add_argument(parser, permissive=permissive)
        return parser

    def parse_cli(self, argv=None, permissive=False):
        """Parse command-line arguments into values.

        Only arguments actually supplied are returned.

        :keyword permissive: when true, does not validate required or extra
            arguments.
        """
        if argv is None:
            argv = self._argv or sys.argv
        options = []
        for option in self._options:
            kwargs = option.kwargs.copy()
            kwargs['default'] = argparse.SUPPRESS
            options.append(Option(*option.args, **kwargs))
        parser = self.build_parser(options, permissive=permissive)
        valid, pass_thru = self.parse_passthru_args(argv[1:])
        parsed, extras = parser.parse_known_args(valid)
        if extras and not permissive:
            raise exceptions.ConfigUnknownOption(
                "Unrecognized arguments: %s" % ', '.join(extras))
        self.pass_thru_args = pass_thru + extras
        return vars(parsed)

    def parse_env(self, env=None, namespace=None):
        """Parse environment variables.

        An option is looked up by its `env` name, then by
        `<NAMESPACE>_<OPTION_NAME>` (namespace defaults to the program name).
        """
        env = os.environ if env is None else env
        results = {}
        namespace = (namespace or self.prog).upper()
        for option in self._options:
            env_var = option.kwargs.get('env')
            default_env = "%s_%s" % (namespace, option.name.upper())
            if env_var and env_var in env:
                results[option.dest] = option.type(env[env_var])
            elif default_env in env:
                results[option.dest] = option.type(env[default_env])
        return results

    def get_defaults(self):
        """Use argparse to determine and return dict of defaults."""
        parser = self.build_parser(self._options, permissive=True)
        parsed, _ = parser.parse_known_args([])
        return vars(parsed)

    def parse_ini(self, paths=None, namespace=None):
        """Parse config files and return configuration options.

        Expects array of files that are in ini format.
        :param paths: list of paths to files to parse (uses ConfigParser
                      logic). If not supplied, uses the ini_paths value
                      supplied on initialization.
        """
        namespace = namespace or self.prog
        results = {}
        self.ini_config = configparser.ConfigParser(interpolation=None)
        self.ini_config.optionxform = str

        if os.path.isfile(self.default_ini) and (
                self.default_ini not in self._ini_paths):
            self._ini_paths.append(self.default_ini)

        parser_errors = (configparser.NoOptionError,
                         configparser.NoSectionError)
        self.ini_config.read(paths or self._ini_paths)
        for option in self._options:
            ini_section = option.kwargs.get('ini_section')
            value = None
            if ini_section:
                try:
                    value = self.ini_config.get(ini_section, option.name)
                    results[option.dest] = option.type(value)
                except parser_errors as err:
                    # ERROR because the option explicitly names a section
                    LOG.error('Error parsing ini file: %r -- Continuing.',
                              err)
            if not value:
                try:
                    value = self.ini_config.get(namespace, option.name)
                    results[option.dest] = option.type(value)
                except parser_errors as err:
                    LOG.debug('Error parsing ini file: %r -- Continuing.',
                              err)
        return results

    def parse_keyring(self, namespace=None):
        """Find settings from keyring."""
        results = {}
        if not keyring:
            return results
        namespace = namespace or self.prog
        for option in self._options:
            secret = keyring.get_password(namespace, option.name)
            if secret:
                results[option.dest] = option.type(secret)
        return results

    def load_options(self, argv=None, keyring_namespace=None, env=None):
        """Find settings from all sources."""
        results = self.get_defaults()
        results.update(self.parse_ini())
        results.update(self.parse_keyring(keyring_namespace))
        results.update(self.parse_env(env=env))
        results.update(self.parse_cli(argv=argv, permissive=True))
        return results

    def parse(self, argv=None, keyring_namespace=None, env=None):
        """Find settings from all sources and validate required options."""
        results = self.load_options(argv=argv,
                                    keyring_namespace=keyring_namespace,
                                    env=env)
        for option in self._options:
            if option.kwargs.get('required'):
                if results.get(option.dest) is None:
                    raise SystemExit("'%s' is required. See --help "
                                     "for more info." % option.name)
        self._values = results
        return self

    @staticmethod
    def parse_passthru_args(argv):
        """Handle arguments to be passed thru to a subprocess using '--'.

        :returns: tuple of two lists; args and pass-thru-args
        """
        if '--' in argv:
            dashdash = argv.index("--")
            return argv[:dashdash], argv[dashdash + 1:]
        return argv, []

    def __repr__(self):
        """Display configured values when representing instance."""
        return "<Config %s>" % ', '.join([
            '%s=%s' % (k, v) for k, v in self.items()])


def read_from(value):
    """Read file and return contents."""
    path = normalized_path(value)
    if not path or not os.path.exists(path):
        raise argparse.ArgumentTypeError("%s is not a valid path." % path)
    LOG.debug("%s exists.", path)
    with open(path, 'r') as reader:
        return reader.read()


def normalized_path(value):
    """Normalize and expand a shorthand or relative path."""
    if not value:
        return
    norm = os.path.normpath(value)
    norm = os.path.abspath(os.path.expanduser(norm))
    return norm


def comma_separated_strings(value):
    """Handle comma-separated arguments passed in command-line."""
    return [str(v) for v in value.split(",")]


def comma_separated_pairs(value):
    """Handle comma-separated key/values passed in command-line."""
    pairs = value.split(",")
    results = {}
    for pair in pairs:
        key, pair_value = pair.split('=')
        results[key] = pair_value
    return results
