import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from stoichio.config import DEFAULT_PERIODIC_TABLE_PATH, periodic_table_path
from stoichio.constants import PERIODIC_TABLE_ENV
from stoichio.elements import PeriodicTable, load_periodic_table, load_periodic_table_records
from stoichio.elements.table import mass_to_milli
from stoichio.models import Atom

from chem_fixtures import FIXTURE_RECORDS, fixture_table


class TestBundledTable(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.table = load_periodic_table(DEFAULT_PERIODIC_TABLE_PATH)

    def test_all_elements_present(self):
        self.assertEqual(len(self.table), 118)

    def test_insertion_order(self):
        atoms = list(self.table)
        self.assertEqual(atoms[0].code, "H")
        self.assertEqual(atoms[9].name, "Neon")
        self.assertEqual(atoms[33].code, "Se")
        self.assertEqual(atoms[70].atomic_mass_milli, 174967)

    def test_lookup(self):
        oxygen = self.table.lookup("O")
        self.assertEqual(oxygen.atomic_mass_milli, 15999)
        self.assertAlmostEqual(oxygen.atomic_mass, 15.999)
        self.assertIn("Fe", self.table)
        self.assertIsNone(self.table.lookup("Xx"))
        self.assertIsNone(self.table.lookup("o"))


class TestPeriodicTable(unittest.TestCase):
    def test_from_records(self):
        table = fixture_table()
        self.assertEqual(len(table), len(FIXTURE_RECORDS))
        self.assertEqual(table.lookup("Pu"), Atom(code="Pu", name="plutonium", atomic_mass_milli=244000))

    def test_duplicate_symbol(self):
        with self.assertRaises(ValueError):
            PeriodicTable.from_records([("hydrogen", "H", "1.008"), ("deuterium", "H", "2.014")])

    def test_mass_to_milli(self):
        self.assertEqual(mass_to_milli("12.011"), 12011)
        self.assertEqual(mass_to_milli("4.0026"), 4003)
        self.assertEqual(mass_to_milli(1.008), 1008)
        self.assertEqual(mass_to_milli("244"), 244000)


class TestLoading(unittest.TestCase):
    def setUp(self):
        self._dir = tempfile.TemporaryDirectory()
        self.dir = Path(self._dir.name)

    def tearDown(self):
        self._dir.cleanup()

    def write(self, name, content):
        path = self.dir / name
        path.write_text(content, encoding="utf-8")
        return path

    def test_custom_file(self):
        path = self.write("mini.csv", "atomic_number,name,symbol,atomic_mass\n1,Hydrogen,H,1.008\n\n8,Oxygen,O,15.999\n")
        self.assertEqual(load_periodic_table_records(path), [("Hydrogen", "H", "1.008"), ("Oxygen", "O", "15.999")])
        self.assertEqual(len(load_periodic_table(path)), 2)

    def test_missing_column(self):
        path = self.write("bad.csv", "atomic_number,name,symbol,atomic_mass\n1,Hydrogen,H\n")
        with self.assertRaisesRegex(ValueError, ":2:"):
            load_periodic_table_records(path)

    def test_bad_mass(self):
        path = self.write("bad.csv", "atomic_number,name,symbol,atomic_mass\n1,Hydrogen,H,light\n")
        with self.assertRaisesRegex(ValueError, "invalid atomic mass"):
            load_periodic_table_records(path)

    def test_missing_file(self):
        with self.assertRaises(OSError):
            load_periodic_table(self.dir / "absent.csv")


class TestPeriodicTablePath(unittest.TestCase):
    def test_default(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(periodic_table_path(), DEFAULT_PERIODIC_TABLE_PATH)
        self.assertTrue(DEFAULT_PERIODIC_TABLE_PATH.is_file())

    def test_environment_variable(self):
        with mock.patch.dict(os.environ, {PERIODIC_TABLE_ENV: "/tmp/elements.csv"}):
            self.assertEqual(periodic_table_path(), Path("/tmp/elements.csv"))

    def test_override_wins(self):
        with mock.patch.dict(os.environ, {PERIODIC_TABLE_ENV: "/tmp/elements.csv"}):
            self.assertEqual(periodic_table_path("other.csv"), Path("other.csv"))

if __name__ == '__main__':
    unittest.main()
