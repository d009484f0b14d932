import argparse
import io
import json
import os
import sys
import tempfile
import unittest
from unittest.mock import patch

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from crdtotypes.crdtotypes import load_commands, main


def get_crd(file_name='crontab.yaml'):
    """Provides the path of a CRD fixture."""
    return os.path.join(os.path.dirname(__file__), 'crd', file_name)


def get_out():
    """Provides the package document output path."""
    return os.path.join(tempfile.gettempdir(), 'crdtotypes', 'package.json')


class TestMain(unittest.TestCase):

    def test_commands(self):
        commands = {command['command']: command for command in load_commands()}
        self.assertEqual(set(commands), {'crd2p', 'validate'})
        self.assertEqual(commands['crd2p']['function']['name'], 'crdtotypes.crdtopackage.convert_crd_to_package')

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command=None))
    def test_main_no_command(self, mock_parse_args):
        """Test main function with no command."""
        with patch('builtins.print'):
            main()

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command=None, version=True))
    def test_main_version(self, mock_parse_args):
        """Test main function with the version flag."""
        with patch('builtins.print') as mock_print:
            main()
        mock_print.assert_called_once_with('crdtotypes 0.1.0')

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(
        command='crd2p', input=[get_crd(), get_crd('bundle.yaml')], out=get_out(), name='crds',
        package_version='1.0.0', python_language=True))
    def test_main_crd2p_command(self, mock_parse_args):
        """Test main function with crd2p command."""
        main()
        assert os.path.exists(get_out())
        with open(get_out(), 'r', encoding='utf-8') as f:
            package = json.load(f)
        self.assertEqual(package['version'], '1.0.0')
        self.assertIn('kubernetes:stable.example.com/v1:CronTab', package['resources'])
        self.assertIn('kubernetes:acme.io/v1:Gadget', package['resources'])
        self.assertEqual(package['language']['python']['moduleNameOverrides']['acme.io/v1'], 'acme/v1')

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(
        command='crd2p', input=[get_crd('legacy.yaml')], out=None, verbose=True))
    def test_main_crd2p_to_stdout(self, mock_parse_args):
        """Test main function with crd2p command writing to stdout."""
        with patch('sys.stdout', new_callable=io.StringIO) as mock_stdout:
            main()
        package = json.loads(mock_stdout.getvalue())
        self.assertEqual(package['name'], 'crds')
        self.assertIn('kubernetes:acme.io/v1alpha1:Widget', package['resources'])

    def test_main_crd2p_from_stdin(self):
        """Test main function with crd2p command reading stdin."""
        with open(get_crd('legacy.yaml'), 'r', encoding='utf-8') as f:
            manifest = f.read()
        args = argparse.Namespace(command='crd2p', input=[], out=None)
        with patch('argparse.ArgumentParser.parse_args', return_value=args), \
                patch('sys.stdin', io.StringIO(manifest)), \
                patch('sys.stdout', new_callable=io.StringIO) as mock_stdout:
            main()
        package = json.loads(mock_stdout.getvalue())
        self.assertIn('kubernetes:acme.io/v1alpha1:Widget', package['resources'])

    def test_main_validate_command(self):
        """Test main function with validate command."""
        with tempfile.TemporaryDirectory() as temp_dir:
            package_path = os.path.join(temp_dir, 'package.json')
            crd2p = argparse.Namespace(command='crd2p', input=[get_crd()], out=package_path)
            with patch('argparse.ArgumentParser.parse_args', return_value=crd2p), patch('builtins.print'):
                main()
            validate = argparse.Namespace(command='validate', input=package_path)
            with patch('argparse.ArgumentParser.parse_args', return_value=validate), \
                    patch('builtins.print') as mock_print:
                main()
            mock_print.assert_called_once_with(f'{package_path}: valid')

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(
        command='crd2p', input=[get_crd('missing.yaml')], out=get_out()))
    def test_main_error(self, mock_parse_args):
        """Test main function exits on conversion errors."""
        with patch('builtins.print') as mock_print:
            with self.assertRaises(SystemExit) as context:
                main()
        self.assertEqual(context.exception.code, 1)
        self.assertEqual(mock_print.call_args[0][0], 'Error: ')

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command='unknown'))
    def test_main_unknown_command(self, mock_parse_args):
        """Test main function with an unknown command."""
        with patch('builtins.print'):
            with self.assertRaises(SystemExit):
                main()


if __name__ == '__main__':
    unittest.main()
