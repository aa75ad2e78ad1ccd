# Copyright (c) 2011-2013 Rackspace Hosting
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

"""ODBC data access helpers.

This module is a thin layer over `pyodbc`. The opinions of the
implementation are:

- we want to supply connection info once (explicitly or from
  :class:`tack.settings.Settings`) and not think about connection strings.
- helpers that open a connection also close it; helpers handed a connection
  leave it (and its transaction) alone.
- statements are parameterized with ODBC `?` markers, never by string
  formatting of values.
- driver errors (`pyodbc.Error` and friends) propagate unchanged.


### Usage

    from tack.db import odbc

    info = odbc.OdbcConnectionInfo(data_source='WAREHOUSE', user='app',
                                   password='secret')
    query = odbc.Query.from_table_or_view(
        'dbo.Widgets', columns=['id', 'name'], where={'active': 1},
        order_by='name', connection_info=info)
    for widget in query.as_rows():
        print(widget['name'])

    odbc.execute_procedure('dbo.ArchiveWidgets', [30], connection_info=info)


### Configuration

`OdbcConnectionInfo.from_settings` reads these keys:

    Tack:Odbc:ConnectionStringName   name under ConnectionStrings:<name>
    Tack:Odbc:ConnectionString       a complete connection string
    Tack:Odbc:DataSource             DSN
    Tack:Odbc:UserName
    Tack:Odbc:Password
    Tack:Odbc:Timeout                connection timeout in seconds
    Tack:Odbc:Attributes:<name>      extra connection string attributes
"""

import collections
import collections.abc
import contextlib
import enum

from tack import exceptions
from tack import log
from tack import sequences
from tack.utils import importing

pyodbc = importing.import_me_maybe('pyodbc')  # pylint: disable=C0103
pandas = importing.import_me_maybe('pandas')  # pylint: disable=C0103

LOG = log.getLogger(__name__)

SETTINGS_PREFIX = 'Tack:Odbc'


class CommandType(enum.Enum):

    """How a command's text is interpreted."""

    TEXT = 'text'
    STORED_PROCEDURE = 'stored_procedure'
    TABLE_FUNCTION = 'table_function'


class AutoTrim(enum.Enum):

    """Post-processing applied to text values read from the database."""

    NONE = 'none'
    TRIM = 'trim'  # strip whitespace
    ZAP = 'zap'  # strip whitespace, blank becomes None


Command = collections.namedtuple('Command', ['statement', 'parameters'])


def build_connection_string(data_source, user=None, password=None,
                            attributes=None, timeout=None):
    """Build an ODBC connection string for a DSN.

    >>> build_connection_string('DBSVR01', user='app', password='pw',
    ...                         attributes={'APP': 'tack'}, timeout=15)
    'DSN=DBSVR01;UID=app;PWD=pw;APP=tack;Connection Timeout=15'

    :returns: the connection string, or `None` without a data source
    """
    if not data_source:
        return None
    parts = ['DSN=%s' % data_source]
    if user is not None:
        parts.append('UID=%s' % user)
        parts.append('PWD=%s' % (password or ''))
    for key, value in (attributes or {}).items():
        parts.append('%s=%s' % (key, value))
    if timeout is not None:
        parts.append('Connection Timeout=%d' % timeout)
    return ';'.join(parts)


class OdbcConnectionInfo(object):

    """Everything needed to open an ODBC connection.

    An explicit `connection_string` wins over the individual parts.
    """

    def __init__(self, connection_string=None, data_source=None, user=None,
                 password=None, attributes=None, timeout=None,
                 autocommit=False):
        self._connection_string = connection_string
        self.data_source = data_source
        self.user = user
        self.password = password
        self.attributes = attributes or {}
        self.timeout = timeout
        self.autocommit = autocommit

    def __repr__(self):
        if self._connection_string:
            return '<OdbcConnectionInfo connection_string=...>'
        return ('<OdbcConnectionInfo data_source=%s user=%s password=%s>'
                % (self.data_source, self.user,
                   '***' if self.password else None))

    @property
    def connection_string(self):
        """The explicit connection string, or one built from the parts."""
        if self._connection_string:
            return self._connection_string
        return build_connection_string(self.data_source, user=self.user,
                                       password=self.password,
                                       attributes=self.attributes,
                                       timeout=self.timeout)

    @classmethod
    def from_settings(cls, settings, prefix=SETTINGS_PREFIX):
        """Load connection info from a :class:`tack.settings.Settings`."""
        def key(name):
            return '%s:%s' % (prefix, name)

        connection_string = None
        name = settings.get(key('ConnectionStringName'))
        if name:
            connection_string = settings.get_connection_string(
                name, required=True)
        else:
            connection_string = settings.get(key('ConnectionString'))
        return cls(
            connection_string=connection_string,
            data_source=settings.get(key('DataSource')),
            user=settings.get(key('UserName')),
            password=settings.get(key('Password')),
            attributes=settings.get_section(key('Attributes')),
            timeout=settings.get_as(key('Timeout'), int),
            autocommit=settings.get_as(key('Autocommit'), bool,
                                       default=False),
        )


def _resolve_info(connection_info=None, settings=None):
    if connection_info is None and settings is not None:
        connection_info = OdbcConnectionInfo.from_settings(settings)
    if connection_info is None or not connection_info.connection_string:
        raise exceptions.ValidationError(
            "No ODBC connection info: supply connection_info or settings "
            "with %s:DataSource or a connection string" % SETTINGS_PREFIX)
    return connection_info


@log.traced(LOG)
def launch_connection(connection_info=None, settings=None):
    """Open and return a `pyodbc` connection.

    :raises ValidationError: if no usable connection info is available
    """
    connection_info = _resolve_info(connection_info, settings=settings)
    driver = importing.require(pyodbc, 'pyodbc')
    LOG.debug("Connecting with %r", connection_info)
    return driver.connect(connection_info.connection_string,
                          autocommit=connection_info.autocommit)


@contextlib.contextmanager
def _connection_scope(connection=None, connection_info=None, settings=None,
                      commit=False):
    """Yield the caller's connection or a new one that is closed on exit.

    New connections are committed on success when `commit` is set.
    """
    if connection is not None:
        yield connection
        return
    conn = launch_connection(connection_info, settings=settings)
    try:
        yield conn
        if commit and not getattr(conn, 'autocommit', False):
            conn.commit()
    finally:
        conn.close()


def _parameter_values(parameters):
    if parameters is None:
        return []
    if isinstance(parameters, collections.abc.Mapping):
        return list(parameters.values())
    return list(parameters)


def _markers(count):
    return ', '.join(['?'] * count)


def build_command(statement, command_type=CommandType.TEXT, parameters=None):
    """Turn a statement, procedure or function name into ODBC SQL.

    :param statement: SQL text, or a procedure/function name
    :keyword parameters: a sequence of values, or a mapping whose values are
        bound in order (ODBC markers are positional)
    """
    values = _parameter_values(parameters)
    if command_type is CommandType.STORED_PROCEDURE:
        if values:
            statement = '{CALL %s (%s)}' % (statement, _markers(len(values)))
        else:
            statement = '{CALL %s}' % statement
    elif command_type is CommandType.TABLE_FUNCTION:
        statement = 'SELECT * FROM %s(%s)' % (statement,
                                              _markers(len(values)))
    return Command(statement, values)


def _column_list(columns):
    if not columns:
        return '*'
    if isinstance(columns, str):
        return columns
    return ', '.join(columns)


def build_where_clause(where):
    """Build a WHERE clause.

    :param where: raw SQL text, or a mapping of column to value (`None`
        values become `IS NULL`, list/tuple values become `IN (...)`)
    :returns: a Command of (clause without the WHERE keyword, parameters)
    """
    if not where:
        return Command('', [])
    if isinstance(where, str):
        return Command(where, [])
    clauses = []
    values = []
    for column, value in where.items():
        if value is None:
            clauses.append('%s IS NULL' % column)
        elif isinstance(value, (list, tuple, set, frozenset)):
            value = list(value)
            clauses.append('%s IN (%s)' % (column, _markers(len(value))))
            values.extend(value)
        else:
            clauses.append('%s = ?' % column)
            values.append(value)
    return Command(' AND '.join(clauses), values)


def build_select_statement(table, columns=None, where=None, group_by=None,
                           order_by=None):
    """Build a SELECT statement against a table or view.

    >>> build_select_statement('dbo.Widgets', columns=['id', 'name'],
    ...                        where={'active': 1}, order_by='name')
    Command(statement='SELECT id, name FROM dbo.Widgets WHERE active = ? \
ORDER BY name', parameters=[1])
    """
    parts = ['SELECT %s FROM %s' % (_column_list(columns), table)]
    clause = build_where_clause(where)
    if clause.statement:
        parts.append('WHERE %s' % clause.statement)
    if group_by:
        parts.append('GROUP BY %s' % _column_list(group_by))
    if order_by:
        parts.append('ORDER BY %s' % _column_list(order_by))
    return Command(' '.join(parts), clause.parameters)


def _execute(conn, command, timeout=None):
    """Run a command and return the cursor.

    A `timeout` applies to this command only; the connection's own timeout
    is restored afterwards.
    """
    LOG.debug("Executing: %s", command.statement,
              extra={'data': command.parameters})
    previous = conn.timeout
    if timeout is not None:
        conn.timeout = timeout
    try:
        cursor = conn.cursor()
        if command.parameters:
            cursor.execute(command.statement, command.parameters)
        else:
            cursor.execute(command.statement)
    finally:
        conn.timeout = previous
    return cursor


def _trim_row(values, auto_trim):
    if auto_trim is AutoTrim.TRIM:
        return sequences.trim_all(values)
    if auto_trim is AutoTrim.ZAP:
        return sequences.zap_all(values)
    return list(values)


class Query(object):

    """A deferred query; nothing runs until one of the `as_*` readers.

    Each reader runs the query again. Pass `connection` to run inside an
    existing connection (and transaction), otherwise one is opened from
    `connection_info` or `settings` and closed when reading finishes.
    """

    def __init__(self, statement, command_type=CommandType.TEXT,
                 parameters=None, connection=None, connection_info=None,
                 settings=None, timeout=None, auto_trim=AutoTrim.NONE):
        self.statement = statement
        self.command_type = command_type
        self.parameters = parameters
        self.connection = connection
        self.connection_info = connection_info
        self.settings = settings
        self.timeout = timeout
        self.auto_trim = auto_trim

    def __repr__(self):
        return '<Query %s %r>' % (self.command_type.value, self.statement)

    @classmethod
    def from_table_or_view(cls, table, columns=None, where=None,
                           group_by=None, order_by=None, **kwargs):
        """Query a table or view. See :func:`build_select_statement`."""
        command = build_select_statement(table, columns=columns, where=where,
                                         group_by=group_by, order_by=order_by)
        return cls(command.statement, parameters=command.parameters,
                   **kwargs)

    @classmethod
    def from_statement(cls, statement, parameters=None, **kwargs):
        """Query with raw SQL text."""
        return cls(statement, parameters=parameters, **kwargs)

    @classmethod
    def from_stored_procedure(cls, procedure, parameters=None, **kwargs):
        """Query the result set of a stored procedure."""
        return cls(procedure, command_type=CommandType.STORED_PROCEDURE,
                   parameters=parameters, **kwargs)

    @classmethod
    def from_table_function(cls, function, parameters=None, **kwargs):
        """Query a table valued function."""
        return cls(function, command_type=CommandType.TABLE_FUNCTION,
                   parameters=parameters, **kwargs)

    @property
    def command(self):
        """The ODBC command this query runs."""
        return build_command(self.statement, command_type=self.command_type,
                             parameters=self.parameters)

    @contextlib.contextmanager
    def _cursor(self):
        with _connection_scope(self.connection, self.connection_info,
                               settings=self.settings) as conn:
            cursor = _execute(conn, self.command, timeout=self.timeout)
            try:
                yield cursor
            finally:
                cursor.close()

    @staticmethod
    def _columns(cursor):
        return [column[0] for column in cursor.description or ()]

    def iter_raw(self):
        """Yield each row as a list of values, streaming from the driver."""
        with self._cursor() as cursor:
            for row in cursor:
                yield _trim_row(row, self.auto_trim)

    def iter_rows(self):
        """Yield each row as a dict keyed by column name."""
        with self._cursor() as cursor:
            columns = self._columns(cursor)
            for row in cursor:
                yield dict(zip(columns, _trim_row(row, self.auto_trim)))

    @log.traced(LOG)
    def as_raw(self):
        """Return all rows as tuples of values."""
        return [tuple(row) for row in self.iter_raw()]

    @log.traced(LOG)
    def as_rows(self):
        """Return all rows as dicts keyed by column name."""
        return list(self.iter_rows())

    @log.traced(LOG)
    def as_scalar(self):
        """Return the first column of the first row (`None` if no rows)."""
        with self._cursor() as cursor:
            row = cursor.fetchone()
        if row is None:
            return None
        return _trim_row(row, self.auto_trim)[0]

    @log.traced(LOG)
    def as_objects(self, factory):
        """Map each row to an object.

        :param factory: a class (or callable) called with each row's values
            as keyword arguments
        """
        return [factory(**row) for row in self.iter_rows()]

    @log.traced(LOG)
    def as_data_frame(self):
        """Return the result set as a `pandas.DataFrame`."""
        frames = importing.require(pandas, 'pandas')
        with self._cursor() as cursor:
            columns = self._columns(cursor)
            records = [_trim_row(row, self.auto_trim) for row in cursor]
        return frames.DataFrame.from_records(records, columns=columns)


@log.traced(LOG)
def execute_sql(statement, parameters=None, connection=None,
                connection_info=None, settings=None, timeout=None):
    """Execute a statement and return the number of rows affected.

    New connections are committed and closed; a supplied `connection` is
    left for the caller to commit.
    """
    command = build_command(statement, parameters=parameters)
    return _execute_command(command, connection=connection,
                            connection_info=connection_info,
                            settings=settings, timeout=timeout)


@log.traced(LOG)
def execute_procedure(procedure, parameters=None, connection=None,
                      connection_info=None, settings=None, timeout=None):
    """Call a stored procedure and return the number of rows affected."""
    command = build_command(procedure,
                            command_type=CommandType.STORED_PROCEDURE,
                            parameters=parameters)
    return _execute_command(command, connection=connection,
                            connection_info=connection_info,
                            settings=settings, timeout=timeout)


@log.traced(LOG)
def insert_table(table, columns, connection=None, connection_info=None,
                 settings=None, timeout=None):
    """Insert one row.

    :param columns: a mapping of column name to value
    :raises ValidationError: when no columns are supplied
    """
    if not columns:
        raise exceptions.ValidationError("insert_table requires columns")
    statement = 'INSERT INTO %s (%s) VALUES (%s)' % (
        table, ', '.join(columns), _markers(len(columns)))
    command = Command(statement, list(columns.values()))
    return _execute_command(command, connection=connection,
                            connection_info=connection_info,
                            settings=settings, timeout=timeout)


def _execute_command(command, connection=None, connection_info=None,
                     settings=None, timeout=None):
    with _connection_scope(connection, connection_info, settings=settings,
                           commit=True) as conn:
        cursor = _execute(conn, command, timeout=timeout)
        try:
            rows_affected = cursor.rowcount
        finally:
            cursor.close()
    LOG.debug("rows affected: %s", rows_affected)
    return rows_affected
