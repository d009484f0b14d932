import json
import os
import sys
import tempfile
import unittest
from unittest.mock import MagicMock, patch

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from crdtotypes.crdtopackage import PackageGenerator, convert_crd_to_package
from crdtotypes.resources import CrdError

CRD_DIR = os.path.join(os.path.dirname(current_script_path), 'crd')
CRONTAB_V1 = 'kubernetes:stable.example.com/v1:CronTab'
CRONTAB_V2 = 'kubernetes:stable.example.com/v2:CronTab'


def get_crd(file_name):
    """Provides the path of a CRD fixture."""
    return os.path.join(CRD_DIR, file_name)


class TestPackageGenerator(unittest.TestCase):

    def setUp(self):
        self.generator = PackageGenerator()

    def test_add_manifests_from_file(self):
        added = self.generator.add_manifests_from(get_crd('crontab.yaml'))
        self.assertEqual([r.kind for r in added], ['CronTab'])
        self.assertEqual(self.generator.resources, added)

    def test_add_manifests_from_file_url(self):
        added = self.generator.add_manifests_from('file://' + os.path.abspath(get_crd('legacy.yaml')).replace('\\', '/'))
        self.assertEqual([r.kind for r in added], ['Widget'])

    def test_bundle_skips_other_documents_and_unpacks_lists(self):
        added = self.generator.add_manifests_from(get_crd('bundle.yaml'))
        self.assertEqual([r.kind for r in added], ['Gadget'])
        self.assertEqual(added[0].versions, ['v1', 'v0'])

    def test_json_manifest(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, 'crd.json')
            with open(path, 'w', encoding='utf-8') as f:
                json.dump({
                    'apiVersion': 'apiextensions.k8s.io/v1',
                    'kind': 'CustomResourceDefinition',
                    'spec': {
                        'group': 'acme.io',
                        'names': {'kind': 'Json', 'plural': 'jsons'},
                        'versions': [{'name': 'v1', 'schema': {'openAPIV3Schema': {'properties': {'a': {'type': 'string'}}}}}],
                    },
                }, f)
            added = self.generator.add_manifests_from(path)
        self.assertEqual(added[0].kind, 'Json')

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            self.generator.add_manifests_from(get_crd('missing.yaml'))

    def test_unsupported_scheme(self):
        with self.assertRaises(ValueError):
            self.generator.fetch_content('ftp://example.com/crd.yaml')

    def test_invalid_yaml(self):
        self.generator.content_cache['broken.yaml'] = 'a: [unclosed'
        with self.assertRaises(ValueError):
            self.generator.add_manifests_from('broken.yaml')

    def test_invalid_crd(self):
        self.generator.content_cache['bad.yaml'] = 'apiVersion: apiextensions.k8s.io/v1\nkind: CustomResourceDefinition\nspec: {}\n'
        with self.assertRaises(CrdError):
            self.generator.add_manifests_from('bad.yaml')

    @patch('crdtotypes.crdtopackage.requests.get')
    def test_fetch_http_is_cached(self, mock_get):
        with open(get_crd('crontab.yaml'), 'r', encoding='utf-8') as f:
            content = f.read()
        response = MagicMock()
        response.text = content
        mock_get.return_value = response
        url = 'https://example.com/crontab.yaml'
        self.assertEqual(self.generator.fetch_content(url), content)
        self.assertEqual(self.generator.fetch_content(url), content)
        mock_get.assert_called_once_with(url, timeout=30)
        response.raise_for_status.assert_called_once()

    def test_yaml_1_1_keys_and_timestamps(self):
        self.generator.add_manifests_from(get_crd('switch.yaml'))
        package = self.generator.schema_package()
        spec = package['types']['kubernetes:acme.io/v1:SwitchSpec']
        self.assertEqual(set(spec['properties']), {'true', '200', 'since'})
        self.assertEqual(spec['properties']['since'], {'type': 'string', 'default': '2020-01-01'})
        self.assertIn('kubernetes:acme.io/v1:SwitchSpecTrue', package['types'])
        self.assertEqual(json.loads(json.dumps(package)), package)

    def test_module_to_package(self):
        self.generator.add_manifests_from(get_crd('crontab.yaml'))
        self.generator.add_manifests_from(get_crd('legacy.yaml'))
        self.assertEqual(self.generator.module_to_package(), {
            'stable.example.com/v1': 'stable/v1',
            'stable.example.com/v2': 'stable/v2',
            'acme.io/v1alpha1': 'acme/v1alpha1',
        })

    def test_python_language(self):
        self.generator.add_manifests_from(get_crd('legacy.yaml'))
        python = self.generator.python_language()['python']
        self.assertEqual(python['compatibility'], 'kubernetes20')
        self.assertEqual(python['moduleNameOverrides'], {'acme.io/v1alpha1': 'acme/v1alpha1'})
        self.assertEqual(python['requires']['pulumi'], '>=3.0.0,<4.0.0')
        self.assertTrue(python['ignorePyNamePanic'])

    def test_schema_package(self):
        self.generator.add_manifests_from(get_crd('crontab.yaml'))
        self.generator.add_manifests_from(get_crd('bundle.yaml'))
        package = self.generator.schema_package()
        self.assertEqual(sorted(package['resources']),
                         sorted([CRONTAB_V1, CRONTAB_V2, 'kubernetes:acme.io/v1:Gadget']))
        # the v0 Gadget schema has no properties
        self.assertNotIn('kubernetes:acme.io/v0:Gadget', package['resources'])
        self.assertIn('kubernetes:meta/v1:ObjectMeta', package['types'])

    def test_schema_package_is_repeatable(self):
        self.generator.add_manifests_from(get_crd('crontab.yaml'))
        first = self.generator.schema_package()
        second = self.generator.schema_package()
        self.assertEqual(json.dumps(first, sort_keys=True), json.dumps(second, sort_keys=True))


class TestConvertCrdToPackage(unittest.TestCase):

    def test_convert_to_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            package_path = os.path.join(temp_dir, 'out', 'package.json')
            package = convert_crd_to_package([get_crd('crontab.yaml'), get_crd('legacy.yaml')], package_path,
                                             name='mycrds', package_version='0.0.1', python_language=True)
            with open(package_path, 'r', encoding='utf-8') as f:
                written = json.load(f)
        self.assertEqual(written, package)
        self.assertEqual(package['name'], 'mycrds')
        self.assertEqual(package['version'], '0.0.1')
        self.assertEqual(package['allowedPackageNames'], ['crds', 'kubernetes'])
        self.assertIn('python', package['language'])
        self.assertIn('kubernetes:acme.io/v1alpha1:Widget', package['resources'])

    def test_convert_without_output(self):
        package = convert_crd_to_package([get_crd('legacy.yaml')])
        self.assertEqual(package['name'], 'crds')
        self.assertNotIn('language', package)

    def test_convert_yaml_1_1_manifest(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            package_path = os.path.join(temp_dir, 'package.json')
            package = convert_crd_to_package([get_crd('switch.yaml')], package_path)
            with open(package_path, 'r', encoding='utf-8') as f:
                self.assertEqual(json.load(f), package)

    def test_failed_conversion_writes_nothing(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            package_path = os.path.join(temp_dir, 'out', 'package.json')
            with self.assertRaises(TypeError):
                convert_crd_to_package([get_crd('binary.yaml')], package_path)
            self.assertFalse(os.path.exists(package_path))
            self.assertFalse(os.path.exists(os.path.dirname(package_path)))

    def test_convert_requires_input(self):
        with self.assertRaises(ValueError):
            convert_crd_to_package([])


if __name__ == '__main__':
    unittest.main()
