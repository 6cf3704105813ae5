from .LPF_BasicMotor import LPF_BasicMotor

class LPF_TachoMotor(LPF_BasicMotor):

	def __init__(self, port=-1, gatt_writer=None):
		super().__init__(port, gatt_writer)

		self.mode_map = {
			'power': 0,
			'speed': 1,
			'rotate': 2,
			'angle': 3,
		}

	def decode_pvs(self, data):
		# Mode 1
		if len(data) == 1:
			# Negative is face-on counterclockwise
			self.emit('speed', { 'speed': int.from_bytes(data[0:1], byteorder="little", signed=True) })
		# Mode 3
		elif len(data) == 2:
			# -180 to 179
			self.emit('angle', { 'angle': int.from_bytes(data[0:2], byteorder="little", signed=True) })
		# Mode 2
		elif len(data) == 4:
			self.emit('rotate', { 'degrees': int.from_bytes(data[0:4], byteorder="little", signed=True) })
		else:
			super().decode_pvs(data)
