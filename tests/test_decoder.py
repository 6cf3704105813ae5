import unittest
from types import SimpleNamespace

from BTBoost.Decoder import Decoder

class TestDecodePayload(unittest.TestCase):

	def test_attached_io(self):
		# Vision sensor on port C
		raw = bytes([ 0xf, 0x0, 0x4, 0x2, 0x1, 0x25, 0x0, 0x0, 0x0, 0x0, 0x10, 0x0, 0x0, 0x0, 0x10 ])
		bt_message = Decoder.decode_payload(raw)
		self.assertFalse(bt_message['error'])
		self.assertEqual(bt_message['port'], 2)
		self.assertEqual(bt_message['event_str'], 'attached')
		self.assertEqual(bt_message['io_type_id'], 0x25)
		self.assertEqual(bt_message['hw_ver_str'], 'v1.0.0.0')

	def test_detached_io(self):
		bt_message = Decoder.decode_payload(bytes([ 0x5, 0x0, 0x4, 0x2, 0x0 ]))
		self.assertFalse(bt_message['error'])
		self.assertEqual(bt_message['event_str'], 'detached')

	def test_port_value_single(self):
		bt_message = Decoder.decode_payload(bytes([ 0x5, 0x0, 0x45, 0x2, 0x9 ]))
		self.assertEqual(bt_message['port'], 2)
		self.assertEqual(bt_message['value'], b'\x09')

	def test_port_input_format(self):
		raw = bytes([ 0xa, 0x0, 0x47, 0x2, 0x8, 0x1, 0x0, 0x0, 0x0, 0x1 ])
		bt_message = Decoder.decode_payload(raw)
		self.assertFalse(bt_message['error'])
		self.assertIn('port 2 mode 8 delta interval:1 Notifications enabled', bt_message['readable'])

	def test_output_feedback(self):
		bt_message = Decoder.decode_payload(bytes([ 0x5, 0x0, 0x82, 0x1, 0xa ]))
		self.assertFalse(bt_message['error'])
		self.assertIn('port:1 feedback:0xa completed,idle', bt_message['readable'])

	def test_generic_error(self):
		bt_message = Decoder.decode_payload(bytes([ 0x5, 0x0, 0x5, 0x81, 0x6 ]))
		self.assertTrue(bt_message['error'])
		self.assertIn('Invalid use of command', bt_message['readable'])

	def test_hub_action(self):
		bt_message = Decoder.decode_payload(bytes([ 0x4, 0x0, 0x2, 0x31 ]))
		self.assertEqual(bt_message['action_str'], 'Hub Will Disconnect')

	def test_length_mismatch(self):
		bt_message = Decoder.decode_payload(bytes([ 0x9, 0x0, 0x45, 0x2, 0x9 ]))
		self.assertTrue(bt_message['error'])

	def test_port_value_without_port(self):
		bt_message = Decoder.decode_payload(bytes([ 0x3, 0x0, 0x45 ]))
		self.assertTrue(bt_message['error'])
		self.assertNotIn('port', bt_message)

		# Lies about its length too
		bt_message = Decoder.decode_payload(bytes([ 0x9, 0x0, 0x45 ]))
		self.assertTrue(bt_message['error'])

	def test_too_short(self):
		bt_message = Decoder.decode_payload(bytes([ 0x2, 0x0 ]))
		self.assertTrue(bt_message['error'])

class TestAdvertisement(unittest.TestCase):

	def test_move_hub(self):
		ad = SimpleNamespace(manufacturer_data={ 919: bytes([ 0x0, 0x40, 0x6, 0xff, 0xff, 0x0 ]) })
		self.assertEqual(Decoder.determine_device_shortname(ad), 'boostmove')

	def test_not_lego(self):
		ad = SimpleNamespace(manufacturer_data={ 76: b'\x01\x02' })
		self.assertEqual(Decoder.determine_device_systemtype(ad), 0x0)
		self.assertTrue(Decoder.determine_device_shortname(ad).startswith('UNKNOWN_LEGO_'))

if __name__ == '__main__':
	unittest.main()
