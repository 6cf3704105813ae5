from .LPF_Device import LPF_Device, Devtype

class Vision(LPF_Device):
	"""
	BOOST Color & Distance sensor (88007)
	"""

	def __init__(self, port=-1, gatt_writer=None):
		super().__init__(port, gatt_writer)

		self.devtype = Devtype.LPF
		self.set_type(0x25)

		# Names as the rest of the world (and the UI) knows them
		self.mode_map = {
			'color': 0,				# COLOR
			'distance': 1,			# PROX
			'distanceCount': 2,		# COUNT
			'reflect': 3,			# REFLT
			'ambient': 4,			# AMBI
			'rgbIntensity': 6,		# RGB I
			'colorAndDistance': 8,	# SPEC 1
		}

	def decode_pvs(self, data):
		mode = self.subscribed_mode

		if mode == 0 and len(data) >= 1:
			# 0 black, 3 blue, 5 green, 7 yellow, 9 red, 10 white, 255 nothing there
			self.emit('color', data[0])

		elif mode == 1 and len(data) >= 1:
			self.emit('distance', { 'distance': data[0] })

		elif mode == 3 and len(data) >= 1:
			self.emit('reflect', { 'reflect': data[0] })

		elif mode == 4 and len(data) >= 1:
			self.emit('ambient', { 'ambient': data[0] })

		elif mode == 8 and len(data) >= 4:
			# color, proximity in inches, LED, fractional inches
			distance = data[1]
			partial = data[3]
			if partial > 0:
				distance += 1.0 / partial
			self.emit('colorAndDistance', {
				'color': data[0],
				'distance': int(distance * 25.4) - 20	# mm, roughly
			})

		else:
			super().decode_pvs(data)
