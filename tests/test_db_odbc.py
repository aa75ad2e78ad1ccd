# coding=utf-8
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
# pylint: disable=R0903,R0904,C0111,C0103

"""Tests for odbc module."""

import collections
import unittest

import mock

from tack import exceptions
from tack import settings
from tack.db import odbc


Widget = collections.namedtuple('Widget', ['id', 'name'])


class TestConnectionString(unittest.TestCase):

    def test_full(self):
        result = odbc.build_connection_string(
            'DBSVR01', user='app', password='pw', attributes={'APP': 'tack'},
            timeout=15)
        self.assertEqual(result, 'DSN=DBSVR01;UID=app;PWD=pw;APP=tack;'
                                 'Connection Timeout=15')

    def test_dsn_only(self):
        self.assertEqual(odbc.build_connection_string('DB1'), 'DSN=DB1')

    def test_no_data_source(self):
        self.assertIsNone(odbc.build_connection_string(None, user='app'))

    def test_explicit_connection_string_wins(self):
        info = odbc.OdbcConnectionInfo(connection_string='Driver=x;Server=y',
                                       data_source='DB1')
        self.assertEqual(info.connection_string, 'Driver=x;Server=y')

    def test_repr_masks_password(self):
        info = odbc.OdbcConnectionInfo(data_source='DB1', user='app',
                                       password='secret')
        self.assertNotIn('secret', repr(info))

    def test_from_settings(self):
        conf = settings.Settings({
            'Tack:Odbc:DataSource': 'DB1',
            'Tack:Odbc:UserName': 'app',
            'Tack:Odbc:Password': 'pw',
            'Tack:Odbc:Timeout': '15',
            'Tack:Odbc:Autocommit': 'true',
            'Tack:Odbc:Attributes:APP': 'tack',
        })
        info = odbc.OdbcConnectionInfo.from_settings(conf)
        self.assertEqual(
            info.connection_string,
            'DSN=DB1;UID=app;PWD=pw;APP=tack;Connection Timeout=15')
        self.assertIs(info.autocommit, True)

    def test_from_settings_named_connection_string(self):
        conf = settings.Settings({
            'Tack:Odbc:ConnectionStringName': 'Warehouse',
            'ConnectionStrings:Warehouse': 'DSN=WAREHOUSE;UID=report',
        })
        info = odbc.OdbcConnectionInfo.from_settings(conf)
        self.assertEqual(info.connection_string, 'DSN=WAREHOUSE;UID=report')

    def test_from_settings_missing_named_connection_string(self):
        conf = settings.Settings({
            'Tack:Odbc:ConnectionStringName': 'Warehouse',
        })
        with self.assertRaises(exceptions.RequiredConfigError):
            odbc.OdbcConnectionInfo.from_settings(conf)


class TestBuildCommand(unittest.TestCase):

    def test_text(self):
        command = odbc.build_command('SELECT 1')
        self.assertEqual(command, odbc.Command('SELECT 1', []))

    def test_stored_procedure(self):
        command = odbc.build_command(
            'dbo.Archive', command_type=odbc.CommandType.STORED_PROCEDURE,
            parameters=[30, 'x'])
        self.assertEqual(command.statement, '{CALL dbo.Archive (?, ?)}')
        self.assertEqual(command.parameters, [30, 'x'])

    def test_stored_procedure_without_parameters(self):
        command = odbc.build_command(
            'dbo.Archive', command_type=odbc.CommandType.STORED_PROCEDURE)
        self.assertEqual(command.statement, '{CALL dbo.Archive}')

    def test_table_function(self):
        command = odbc.build_command(
            'dbo.Recent', command_type=odbc.CommandType.TABLE_FUNCTION,
            parameters={'days': 7})
        self.assertEqual(command.statement, 'SELECT * FROM dbo.Recent(?)')
        self.assertEqual(command.parameters, [7])

    def test_where_clause(self):
        clause = odbc.build_where_clause(
            {'active': 1, 'deleted': None, 'kind': ['a', 'b']})
        self.assertEqual(clause.statement,
                         'active = ? AND deleted IS NULL AND kind IN (?, ?)')
        self.assertEqual(clause.parameters, [1, 'a', 'b'])

    def test_where_clause_text(self):
        self.assertEqual(odbc.build_where_clause('id > 5'),
                         odbc.Command('id > 5', []))
        self.assertEqual(odbc.build_where_clause(None), odbc.Command('', []))

    def test_select_statement(self):
        command = odbc.build_select_statement(
            'dbo.Widgets', columns=['id', 'name'], where={'active': 1},
            order_by='name')
        self.assertEqual(
            command.statement,
            'SELECT id, name FROM dbo.Widgets WHERE active = ? ORDER BY name')
        self.assertEqual(command.parameters, [1])

    def test_select_statement_group_by(self):
        command = odbc.build_select_statement(
            'dbo.Widgets', columns='kind, COUNT(*)', group_by=['kind'])
        self.assertEqual(
            command.statement,
            'SELECT kind, COUNT(*) FROM dbo.Widgets GROUP BY kind')


class OdbcTestCase(unittest.TestCase):

    """Patches the driver with a mock connection and cursor."""

    def setUp(self):
        patcher = mock.patch.object(odbc, 'pyodbc')
        self.pyodbc = patcher.start()
        self.addCleanup(patcher.stop)
        self.conn = self.pyodbc.connect.return_value
        self.conn.autocommit = False
        self.cursor = self.conn.cursor.return_value
        self.cursor.description = (('id', int), ('name', str))
        self.rows = [(1, ' widget '), (2, '')]
        self.cursor.__iter__.side_effect = lambda: iter(self.rows)
        self.info = odbc.OdbcConnectionInfo(data_source='DB1')


class TestConnection(OdbcTestCase):

    def test_launch_connection(self):
        conn = odbc.launch_connection(self.info)
        self.assertIs(conn, self.conn)
        self.pyodbc.connect.assert_called_once_with('DSN=DB1',
                                                    autocommit=False)

    def test_launch_connection_from_settings(self):
        conf = settings.Settings({'Tack:Odbc:DataSource': 'DB2'})
        odbc.launch_connection(settings=conf)
        self.pyodbc.connect.assert_called_once_with('DSN=DB2',
                                                    autocommit=False)

    def test_launch_connection_without_info(self):
        with self.assertRaises(exceptions.ValidationError):
            odbc.launch_connection()
        with self.assertRaises(exceptions.ValidationError):
            odbc.launch_connection(settings=settings.Settings({}))

    def test_driver_missing(self):
        with mock.patch.object(odbc, 'pyodbc', None):
            with self.assertRaises(ImportError):
                odbc.launch_connection(self.info)


class TestQuery(OdbcTestCase):

    def test_as_rows(self):
        query = odbc.Query.from_table_or_view(
            'dbo.Widgets', columns=['id', 'name'], where={'active': 1},
            connection_info=self.info)
        rows = query.as_rows()
        self.assertEqual(rows, [{'id': 1, 'name': ' widget '},
                                {'id': 2, 'name': ''}])
        self.cursor.execute.assert_called_once_with(
            'SELECT id, name FROM dbo.Widgets WHERE active = ?', [1])
        self.cursor.close.assert_called_once_with()
        self.conn.close.assert_called_once_with()
        self.conn.commit.assert_not_called()

    def test_as_raw_zapped(self):
        query = odbc.Query.from_statement('SELECT id, name FROM w',
                                          connection_info=self.info,
                                          auto_trim=odbc.AutoTrim.ZAP)
        self.assertEqual(query.as_raw(), [(1, 'widget'), (2, None)])
        self.cursor.execute.assert_called_once_with('SELECT id, name FROM w')

    def test_as_raw_trimmed(self):
        query = odbc.Query('SELECT id, name FROM w', connection_info=self.info,
                           auto_trim=odbc.AutoTrim.TRIM)
        self.assertEqual(query.as_raw(), [(1, 'widget'), (2, '')])

    def test_as_scalar(self):
        self.cursor.fetchone.return_value = (42,)
        query = odbc.Query.from_statement('SELECT COUNT(*) FROM w',
                                          connection_info=self.info)
        self.assertEqual(query.as_scalar(), 42)

    def test_as_scalar_no_rows(self):
        self.cursor.fetchone.return_value = None
        query = odbc.Query.from_statement('SELECT id FROM w',
                                          connection_info=self.info)
        self.assertIsNone(query.as_scalar())

    def test_as_objects(self):
        query = odbc.Query.from_stored_procedure(
            'dbo.ListWidgets', [5], connection_info=self.info)
        self.assertEqual(query.as_objects(Widget),
                         [Widget(1, ' widget '), Widget(2, '')])
        self.cursor.execute.assert_called_once_with(
            '{CALL dbo.ListWidgets (?)}', [5])

    def test_table_function(self):
        query = odbc.Query.from_table_function('dbo.Recent', [7],
                                               connection_info=self.info)
        query.as_raw()
        self.cursor.execute.assert_called_once_with(
            'SELECT * FROM dbo.Recent(?)', [7])

    def test_timeout(self):
        seen = []
        self.cursor.execute.side_effect = (
            lambda *args: seen.append(self.conn.timeout))
        query = odbc.Query('SELECT 1', connection_info=self.info, timeout=9)
        query.as_raw()
        self.assertEqual(seen, [9])

    def test_timeout_restored_on_caller_connection(self):
        conn = mock.MagicMock()
        conn.timeout = 0
        conn.cursor.return_value = self.cursor
        query = odbc.Query('SELECT 1', connection=conn, timeout=9)
        query.as_raw()
        self.assertEqual(conn.timeout, 0)

    def test_timeout_restored_on_error(self):
        conn = mock.MagicMock()
        conn.timeout = 5
        conn.cursor.return_value = self.cursor
        self.cursor.execute.side_effect = RuntimeError('boom')
        with self.assertRaises(RuntimeError):
            odbc.execute_sql('DELETE FROM w', connection=conn, timeout=30)
        self.assertEqual(conn.timeout, 5)

    def test_caller_connection_left_open(self):
        conn = mock.MagicMock()
        conn.cursor.return_value = self.cursor
        query = odbc.Query('SELECT id, name FROM w', connection=conn)
        query.as_raw()
        self.pyodbc.connect.assert_not_called()
        conn.close.assert_not_called()

    def test_connection_closed_on_error(self):
        self.cursor.execute.side_effect = RuntimeError('boom')
        query = odbc.Query('SELECT 1', connection_info=self.info)
        with self.assertRaises(RuntimeError):
            query.as_raw()
        self.conn.close.assert_called_once_with()

    def test_as_data_frame(self):
        with mock.patch.object(odbc, 'pandas') as pandas:
            query = odbc.Query('SELECT id, name FROM w',
                               connection_info=self.info)
            frame = query.as_data_frame()
        pandas.DataFrame.from_records.assert_called_once_with(
            [[1, ' widget '], [2, '']], columns=['id', 'name'])
        self.assertIs(frame, pandas.DataFrame.from_records.return_value)


class TestExecute(OdbcTestCase):

    def test_execute_sql_commits(self):
        self.cursor.rowcount = 3
        result = odbc.execute_sql('UPDATE w SET name = ?', ['x'],
                                  connection_info=self.info)
        self.assertEqual(result, 3)
        self.cursor.execute.assert_called_once_with('UPDATE w SET name = ?',
                                                    ['x'])
        self.conn.commit.assert_called_once_with()
        self.conn.close.assert_called_once_with()

    def test_execute_sql_autocommit(self):
        self.conn.autocommit = True
        odbc.execute_sql('DELETE FROM w', connection_info=self.info)
        self.conn.commit.assert_not_called()

    def test_execute_sql_caller_connection(self):
        conn = mock.MagicMock()
        conn.cursor.return_value = self.cursor
        odbc.execute_sql('DELETE FROM w', connection=conn)
        conn.commit.assert_not_called()
        conn.close.assert_not_called()

    def test_execute_procedure(self):
        self.cursor.rowcount = -1
        result = odbc.execute_procedure('dbo.Archive', [30],
                                        connection_info=self.info)
        self.assertEqual(result, -1)
        self.cursor.execute.assert_called_once_with('{CALL dbo.Archive (?)}',
                                                    [30])

    def test_insert_table(self):
        self.cursor.rowcount = 1
        result = odbc.insert_table('dbo.Widgets', {'id': 3, 'name': 'w'},
                                   connection_info=self.info)
        self.assertEqual(result, 1)
        self.cursor.execute.assert_called_once_with(
            'INSERT INTO dbo.Widgets (id, name) VALUES (?, ?)', [3, 'w'])

    def test_insert_table_requires_columns(self):
        with self.assertRaises(exceptions.ValidationError):
            odbc.insert_table('dbo.Widgets', {}, connection_info=self.info)


if __name__ == '__main__':
    unittest.main()
