import unittest

from BTBoost.Errors import EmptyPort
from BTBoost.PortResolver import resolve_port, number_from_text

class TestResolvePort(unittest.TestCase):

	def test_letters_are_upper_cased(self):
		self.assertEqual(resolve_port("b"), "B")
		self.assertEqual(resolve_port(" d "), "D")
		self.assertEqual(resolve_port("A"), "A")

	def test_numbers_keep_numeric_identity(self):
		self.assertEqual(resolve_port(" 2 "), 2)
		self.assertIsInstance(resolve_port(" 2 "), int)
		self.assertEqual(resolve_port(3), 3)
		self.assertEqual(resolve_port("0"), 0)
		self.assertEqual(resolve_port("1.5"), 1.5)

	def test_unknown_labels_pass_through_trimmed(self):
		self.assertEqual(resolve_port(" ab "), "ab")
		self.assertEqual(resolve_port("E"), "E")

	def test_non_finite_numbers_stay_text(self):
		self.assertEqual(resolve_port("inf"), "inf")
		self.assertEqual(resolve_port("nan"), "nan")

	def test_empty_port_fails(self):
		for port in ( "", "   ", None ):
			with self.subTest(port=port):
				with self.assertRaises(EmptyPort):
					resolve_port(port)

class TestNumberFromText(unittest.TestCase):

	def test_parses(self):
		self.assertEqual(number_from_text("8"), 8)
		self.assertEqual(number_from_text("-3"), -3)
		self.assertIsNone(number_from_text("color"))
		self.assertIsNone(number_from_text(""))
		self.assertIsNone(number_from_text(None))

if __name__ == '__main__':
	unittest.main()
