from .LPF_Device import LPF_Device, Devtype

class LPF_BasicMotor(LPF_Device):

	def __init__(self, port=-1, gatt_writer=None):
		super().__init__(port, gatt_writer)

		self.devtype = Devtype.LPF

		self.mode_map = {
			'power': 0,
		}

	async def set_power(self, power):
		'''
		power:
			Integer from -100 to 100

			Negative being counterclockwise, except for one of the BoostHubMotor(s)
			so that the same command to both motors drives them in the same direction

			Mode 0 is listed as various names for older or simpler motors,
			but is mostly standardized as POWER
		'''
		mode = 0x0
		power = int(power)

		if power > 100 or power < -100:
			self.logger.error(f'Refusing power {power} for {self.name} on port {self.port}')
			return False

		payload = bytearray([
			0x7,	# len
			0x0,	# padding
			0x81,	# Command: port_output_command
			# end header
			self.port,
			0x0,	# Startup and completion information (Buffer if necessary (upper 0x0), No Action (lower 0x0))
			0x51,	# Subcommand: WriteDirectModeData
			mode	# Mode 0 "Power"
		])
		payload += bytearray(power.to_bytes(length=1, byteorder='little', signed=True))
		payload[0] = len(payload)

		return await self._write(payload)
