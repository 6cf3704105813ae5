import json
import os
import tempfile
import unittest

from BTBoost.Config import BoostConfig, load_config

class TestBoostConfig(unittest.TestCase):

	def test_defaults(self):
		config = BoostConfig()
		self.assertEqual(config.discovery_timeout, 20)
		self.assertEqual(config.left_port, 'A')
		self.assertEqual(config.right_port, 'B')
		self.assertEqual(config.default_sensor_mode, 'color')
		self.assertEqual(config.hub_types, ('boostmove',))

	def test_keywords(self):
		config = BoostConfig(discovery_timeout=5, hub_types=['boostmove', 'hub_2'])
		self.assertEqual(config.discovery_timeout, 5)
		self.assertEqual(config.hub_types, ('boostmove', 'hub_2'))
		# Class defaults untouched
		self.assertEqual(BoostConfig.discovery_timeout, 20)

	def test_unknown_keyword(self):
		with self.assertRaises(TypeError):
			BoostConfig(warp_speed=9)

	def test_from_dict_ignores_unknown(self):
		with self.assertLogs('BTBoost', level='WARNING'):
			config = BoostConfig.from_dict({ 'head_port': 'C', 'warp_speed': 9 })
		self.assertEqual(config.head_port, 'C')
		self.assertFalse(hasattr(config, 'warp_speed'))

class TestLoadConfig(unittest.TestCase):

	def setUp(self):
		self.tmpdir = tempfile.TemporaryDirectory()
		self.path = os.path.join(self.tmpdir.name, 'btboost.json')

	def tearDown(self):
		self.tmpdir.cleanup()

	def test_missing_file(self):
		config = load_config(self.path)
		self.assertEqual(config.as_dict(), BoostConfig().as_dict())

	def test_reads_file(self):
		with open(self.path, 'w') as f:
			json.dump({ 'discovery_timeout': 7, 'left_port': 'C' }, f)
		config = load_config(self.path)
		self.assertEqual(config.discovery_timeout, 7)
		self.assertEqual(config.left_port, 'C')
		self.assertEqual(config.right_port, 'B')

	def test_broken_file(self):
		with open(self.path, 'w') as f:
			f.write('{ not json')
		with self.assertLogs('BTBoost', level='ERROR'):
			config = load_config(self.path)
		self.assertEqual(config.discovery_timeout, 20)

	def test_not_an_object(self):
		with open(self.path, 'w') as f:
			json.dump([ 1, 2 ], f)
		with self.assertLogs('BTBoost', level='ERROR'):
			config = load_config(self.path)
		self.assertEqual(config.discovery_timeout, 20)

if __name__ == '__main__':
	unittest.main()
