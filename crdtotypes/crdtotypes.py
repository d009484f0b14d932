"""

Command line utility to convert Kubernetes CustomResourceDefinitions to package documents.

"""


import argparse
import json
import logging
import os
import sys
import tempfile

from crdtotypes import _version

ARG_TYPES = {'str': str, 'int': int}


def load_commands():
    """Load the commands from the commands.json file."""
    commands_path = os.path.join(os.path.dirname(__file__), 'commands.json')
    with open(commands_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def create_subparsers(subparsers, commands):
    """Create subparsers for the commands."""
    for command in commands:
        cmd_parser = subparsers.add_parser(command['command'], help=command['description'])
        for arg in command['args']:
            kwargs = {
                'help': arg['help'],
            }
            if 'nargs' in arg:
                kwargs['nargs'] = arg['nargs']
            if 'choices' in arg:
                kwargs['choices'] = arg['choices']
            if 'default' in arg:
                kwargs['default'] = arg['default']
            if arg['type'] == 'bool':
                kwargs['action'] = 'store_true'
            else:
                kwargs['type'] = ARG_TYPES[arg['type']]
            carg = cmd_parser.add_argument(arg['name'], **kwargs)
            if arg['name'].startswith('-'):
                carg.required = arg.get('required', True)


def dynamic_import(module, func):
    """Dynamically import a module and function."""
    mod = __import__(module, fromlist=[func])
    return getattr(mod, func)


def read_stdin_to_temp_file() -> str:
    """Copy stdin into a temporary file and return its path."""
    with tempfile.NamedTemporaryFile(delete=False, mode='w', encoding='utf-8', suffix='.yaml') as temp_input:
        s = sys.stdin.read()
        while s:
            temp_input.write(s)
            s = sys.stdin.read()
        return temp_input.name


def main():
    """Main function for the command line utility."""
    commands = load_commands()
    parser = argparse.ArgumentParser(description='Convert Kubernetes CustomResourceDefinitions to package documents.')
    parser.add_argument('--version', action='store_true', help='Print the version of crdtotypes.')
    parser.add_argument('--verbose', action='store_true', help='Log the translation steps.')

    subparsers = parser.add_subparsers(dest='command')
    create_subparsers(subparsers, commands)

    args = parser.parse_args()

    if 'version' in args and args.version:
        print(f'crdtotypes {_version.version}')
        return

    if args.command is None:
        parser.print_help()
        return

    logging.basicConfig(level=logging.DEBUG if getattr(args, 'verbose', False) else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    temp_input = None
    temp_output = None
    try:
        command = next((cmd for cmd in commands if cmd['command'] == args.command), None)
        if not command:
            print(f"Error: Command {args.command} not found.")
            sys.exit(1)

        input_file_paths = getattr(args, 'input', None) or []
        if isinstance(input_file_paths, str):
            input_file_paths = [input_file_paths]
        if not input_file_paths:
            temp_input = read_stdin_to_temp_file()
            input_file_paths = [temp_input]

        output_file_path = ''
        if not command.get('skip_output_file_handling', False):
            output_file_path = getattr(args, 'out', None)
            if output_file_path is None:
                temp_output = tempfile.NamedTemporaryFile(delete=False)
                temp_output.close()
                output_file_path = temp_output.name

        module_name, func_name = command['function']['name'].rsplit('.', 1)
        func = dynamic_import(module_name, func_name)
        func_args = {}
        for arg, val in command['function']['args'].items():
            if val == 'input_file_path':
                func_args[arg] = input_file_paths[0]
            elif val == 'input_file_paths':
                func_args[arg] = input_file_paths
            elif val == 'output_file_path':
                func_args[arg] = output_file_path
            elif val.startswith('args.'):
                if hasattr(args, val[5:]):
                    func_args[arg] = getattr(args, val[5:])
            else:
                func_args[arg] = val
        if output_file_path and not temp_output:
            print(f'Executing {command["description"]} with input {", ".join(input_file_paths)} and output {output_file_path}')
        func(**func_args)

        if temp_output:
            with open(output_file_path, 'r', encoding='utf-8') as f:
                sys.stdout.write(f.read())
            sys.stdout.write('\n')

    except Exception as e:  # pylint: disable=broad-except
        print("Error: ", str(e))
        sys.exit(1)
    finally:
        for temp_path in (temp_input, temp_output.name if temp_output else None):
            if temp_path:
                try:
                    os.remove(temp_path)
                except OSError as e:
                    print(f"Error: Could not delete temporary file {temp_path}. {e}")


if __name__ == "__main__":
    main()
