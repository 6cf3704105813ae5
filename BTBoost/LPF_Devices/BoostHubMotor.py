from .LPF_Device import Devtype
from .LPF_TachoMotor import LPF_TachoMotor

class BoostHubMotor(LPF_TachoMotor):

	def __init__(self, port=-1, gatt_writer=None):
		super().__init__(port, gatt_writer)

		self.devtype = Devtype.FIXED
		self.set_type(0x27)

		# With "forward" being the side the LED is on, A and B spin the same
		# way for the same sign so both can get the same power to drive straight
