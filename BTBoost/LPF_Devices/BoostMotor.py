from .LPF_TachoMotor import LPF_TachoMotor

class BoostMotor(LPF_TachoMotor):

	def __init__(self, port=-1, gatt_writer=None):
		super().__init__(port, gatt_writer)

		self.part_identifier = 88008
		self.set_type(0x26)
