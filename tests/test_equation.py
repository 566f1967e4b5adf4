import unittest
from chem_fixtures import fixture_table
from stoichio.equation import (
    parse_equation_text,
    parse_quantified_equation,
    parse_raw_equation,
    parse_raw_equation_text,
)
from stoichio.errors import LexicalError, SemanticError, StructuralError
from stoichio.formula import parse_formula
from stoichio.models import Quantity, QuantityMode, RawEquation, Unit
from stoichio.tokenizer import tokenize


class TestParseRawEquation(unittest.TestCase):
    def setUp(self):
        self.table = fixture_table()

    def molecule(self, text):
        return parse_formula(self.table, text)

    def test_photosynthesis(self):
        actual = parse_raw_equation(self.table, tokenize("C6H12O6 + O2 => H2O + CO2"))
        expected = RawEquation(
            reactants=(self.molecule("C6H12O6"), self.molecule("O2")),
            products=(self.molecule("H2O"), self.molecule("CO2")),
            arrow="=>",
        )
        self.assertEqual(actual, expected)
        self.assertEqual(str(actual), "C6H12O6 + O2 => H2O + CO2")

    def test_arrow_spelling_is_preserved(self):
        for arrow in ["->", "<=>", "=", "==>"]:
            with self.subTest(arrow=arrow):
                equation = parse_raw_equation_text(self.table, f"H2 + O2 {arrow} H2O")
                self.assertEqual(equation.arrow, arrow)
                self.assertEqual(len(equation.reactants), 2)

    def test_charge_signs_are_not_separators(self):
        equation = parse_raw_equation_text(self.table, "CH3COO^- + H^+ => CH3COOH")
        self.assertEqual([m.charge for m in equation.reactants], [-1, 1])

        equation = parse_raw_equation_text(self.table, "Fe^3+ + Cl^- => FeCl^2+")
        self.assertEqual([m.charge for m in equation.reactants], [3, -1])
        self.assertEqual([m.charge for m in equation.products], [2])

        equation = parse_raw_equation_text(self.table, "Fe^+3+Cl^-=FeCl^2+")
        self.assertEqual([str(m) for m in equation.reactants], ["Fe^+3", "Cl^-"])

    def test_rejects_quantities(self):
        with self.assertRaises(SemanticError) as caught:
            parse_raw_equation_text(self.table, "2 mol H2 => H2")
        self.assertEqual(caught.exception.offset, 0)

    def test_arrow_count(self):
        with self.assertRaises(SemanticError) as caught:
            parse_raw_equation_text(self.table, "H2 + O2")
        self.assertIsNone(caught.exception.offset)

        with self.assertRaises(SemanticError) as caught:
            parse_raw_equation_text(self.table, "H2 => H => H2")
        self.assertEqual(caught.exception.offset, 8)

    def test_empty_segments(self):
        with self.assertRaises(SemanticError) as caught:
            parse_raw_equation_text(self.table, "H2 + + O2 => H2O")
        self.assertEqual(caught.exception.offset, 3)

        with self.assertRaises(SemanticError) as caught:
            parse_raw_equation_text(self.table, "=> H2O")
        self.assertEqual(caught.exception.offset, 0)

        with self.assertRaises(SemanticError) as caught:
            parse_raw_equation_text(self.table, "H2 =>  ")
        self.assertEqual(caught.exception.offset, 3)

    def test_formula_errors_propagate_with_equation_offsets(self):
        with self.assertRaises(LexicalError) as caught:
            parse_raw_equation_text(self.table, "H2 & O2 => H2O")
        self.assertEqual(caught.exception.offset, 3)

        with self.assertRaises(StructuralError) as caught:
            parse_raw_equation_text(self.table, "O2 + Se(CH3]2O => Se")
        self.assertEqual(caught.exception.offset, 11)

        with self.assertRaises(SemanticError) as caught:
            parse_raw_equation_text(self.table, "H2 + Zz => H2")
        self.assertEqual(caught.exception.offset, 5)


class TestParseQuantifiedEquation(unittest.TestCase):
    def setUp(self):
        self.table = fixture_table()

    def test_quantity_prefixes(self):
        equation = parse_quantified_equation(
            self.table, tokenize("2.5 g H2 + 3 mol O2 + 10mg NaCl => H2O")
        )
        quantities = [q for _, q in equation.reactants]
        self.assertEqual(
            quantities,
            [Quantity(2.5, Unit.GRAM), Quantity(3.0, Unit.MOLE), Quantity(10.0, Unit.MILLIGRAM)],
        )
        self.assertEqual([str(m) for m, _ in equation.reactants], ["H2", "O2", "NaCl"])
        self.assertEqual(equation.products[0][1], None)
        self.assertEqual(equation.mode, QuantityMode.LIMITING)

    def test_modes(self):
        self.assertEqual(parse_equation_text(self.table, "H2 + O2 => H2O").mode, QuantityMode.NONE)
        self.assertEqual(
            parse_equation_text(self.table, "1 mol H2 + 2 g O2 => 5 mg H2O").mode, QuantityMode.ALL
        )
        mixed = parse_equation_text(self.table, "1 mol H2 + O2 => H2O")
        with self.assertRaises(SemanticError):
            mixed.mode

    def test_raw_drops_quantities(self):
        equation = parse_equation_text(self.table, "1 mol H2 + 1 mol O2 => H2O")
        self.assertEqual(equation.raw(), parse_raw_equation_text(self.table, "H2 + O2 => H2O"))

    def test_rendering(self):
        equation = parse_equation_text(self.table, "2.5 g H2 + 3 mol O2 -> H2O")
        self.assertEqual(str(equation), "2.5 g H2 + 3 mol O2 -> H2O")

    def test_bad_quantities(self):
        with self.assertRaises(SemanticError) as caught:
            parse_equation_text(self.table, "2 H2 => H2")
        self.assertEqual(caught.exception.offset, 2)

        with self.assertRaises(SemanticError) as caught:
            parse_equation_text(self.table, "2. g H2 => H2")
        self.assertEqual(caught.exception.offset, 1)

        with self.assertRaises(SemanticError) as caught:
            parse_equation_text(self.table, "2 kg H2 => H2")
        self.assertEqual(caught.exception.offset, 2)

        with self.assertRaises(SemanticError):
            parse_equation_text(self.table, "2 mol => H2")

if __name__ == '__main__':
    unittest.main()
