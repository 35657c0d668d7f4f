import os
import shutil
import tempfile
import unittest

import numpy as np
import yaml

from phasestate.species_directory import SpeciesDirectory, load_species
from phasestate.species_properties import charge_from_name, molecular_weight_from_formula


class TestSpeciesProperties(unittest.TestCase):

    def test_molecular_weights(self):
        self.assertAlmostEqual(molecular_weight_from_formula("O"), 15.999, places=3)
        self.assertAlmostEqual(molecular_weight_from_formula("O2"), 2 * 15.999, places=3)
        self.assertAlmostEqual(molecular_weight_from_formula("H2O"), 2 * 1.008 + 15.999, places=3)
        self.assertAlmostEqual(molecular_weight_from_formula("CO2"), 12.011 + 2 * 15.999, places=3)

    def test_decorations_ignored(self):
        self.assertAlmostEqual(molecular_weight_from_formula("O2+"), 2 * 15.999, places=3)
        self.assertAlmostEqual(molecular_weight_from_formula("O-"), 15.999, places=3)
        self.assertAlmostEqual(molecular_weight_from_formula("Ar_4s"), 39.948, places=3)
        self.assertAlmostEqual(molecular_weight_from_formula("N2[v1]"), 2 * 14.007, places=3)

    def test_electron(self):
        self.assertAlmostEqual(molecular_weight_from_formula("e"), 5.48579909e-4, places=10)

    def test_unparseable(self):
        self.assertIsNone(molecular_weight_from_formula("foo"))
        with self.assertLogs('phasestate.species_properties', level='WARNING'):
            self.assertIsNone(molecular_weight_from_formula("Xq2"))

    def test_charges(self):
        self.assertEqual(charge_from_name("e"), -1)
        self.assertEqual(charge_from_name("Ar"), 0)
        self.assertEqual(charge_from_name("O2+"), 1)
        self.assertEqual(charge_from_name("O-"), -1)
        self.assertEqual(charge_from_name("O2++"), 2)
        self.assertEqual(charge_from_name("Ar_4s"), 0)
        self.assertEqual(charge_from_name("Ar_4s+"), 1)


class TestSpeciesDirectory(unittest.TestCase):

    def setUp(self):
        self.directory = SpeciesDirectory()
        self.directory.add_species('O2')
        self.directory.add_species('O2+')
        self.directory.add_species('e')

    def test_lookup(self):
        self.assertEqual(self.directory.n_species, 3)
        self.assertEqual(self.directory.species_index('O2+'), 1)
        self.assertEqual(self.directory.species_name(2), 'e')
        self.assertEqual(self.directory.species_index('N2'), -1)
        self.assertIn('O2', self.directory)

    def test_non_positive_weight_rejected(self):
        self.directory.freeze()
        for mw in (0.0, -1.0):
            with self.assertRaises(ValueError):
                self.directory.add_species('X', molecular_weight=mw)
        self.assertEqual(self.directory.n_species, 3)
        self.assertNotIn('X', self.directory)
        self.assertTrue(self.directory.ready())

    def test_derived_properties(self):
        self.assertAlmostEqual(self.directory.molecular_weight(0), 31.998, places=3)
        self.assertEqual(self.directory.charge(1), 1.0)
        self.assertEqual(self.directory.charge(2), -1.0)
        np.testing.assert_array_equal(self.directory.charges(), [0.0, 1.0, -1.0])

    def test_explicit_properties(self):
        k = self.directory.add_species('X', molecular_weight=10.0, charge=2)
        self.assertEqual(self.directory.molecular_weight(k), 10.0)
        self.assertEqual(self.directory.charge(k), 2.0)

    def test_duplicate_rejected(self):
        with self.assertRaises(ValueError):
            self.directory.add_species('O2')

    def test_unknown_formula_needs_weight(self):
        with self.assertRaises(ValueError):
            self.directory.add_species('Foo')

    def test_freeze_and_ready(self):
        self.assertFalse(self.directory.ready())
        self.directory.freeze()
        self.assertTrue(self.directory.ready())
        mw = self.directory.molecular_weights()
        self.assertEqual(len(mw), 3)
        self.assertFalse(mw.flags.writeable)

        with self.assertLogs('phasestate.species_directory', level='WARNING'):
            self.directory.add_species('O')
        self.assertFalse(self.directory.ready())


class TestLoadSpecies(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def _write(self, name, content):
        path = os.path.join(self.test_dir, name)
        with open(path, 'w') as f:
            yaml.dump(content, f)
        return path

    def test_mixed_entries(self):
        path = self._write('species.yml', {
            'species': ['N2', {'name': 'N2+', 'mass_amu': 28.0}, {'name': 'Z', 'molecular_weight': 5.0, 'charge': -2}]
        })
        directory = load_species(path)
        self.assertEqual(directory.species_names, ['N2', 'N2+', 'Z'])
        self.assertEqual(directory.molecular_weight(1), 28.0)
        self.assertEqual(directory.charge(1), 1.0)
        self.assertEqual(directory.charge(2), -2.0)
        self.assertFalse(directory.ready())

    def test_plain_list(self):
        path = self._write('species.yml', ['Ar', 'Ar+', 'e'])
        directory = load_species(path)
        self.assertEqual(directory.n_species, 3)

    def test_merge_files(self):
        first = self._write('a.yml', {'species': ['N2', 'O2']})
        second = self._write('b.yml', {'species': ['O2', 'Ar']})
        directory = load_species(first)
        load_species(second, directory, skip_existing=True)
        self.assertEqual(directory.species_names, ['N2', 'O2', 'Ar'])
        with self.assertRaises(ValueError):
            load_species(second, directory)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_species(os.path.join(self.test_dir, 'missing.yml'))

    def test_empty_file(self):
        path = self._write('empty.yml', {'species': []})
        with self.assertRaises(ValueError):
            load_species(path)


if __name__ == '__main__':
    unittest.main()
