import importlib

from .LPF_Device import LPF_Device
from ..Decoder import LDev

def LPF_class_for_type_id(type_id):
	# io_type_id_str indicies
	dev_classes = {
		LDev.VISION:'Vision',
		LDev.MOTOR_BOOST:'BoostMotor',
		LDev.MOTOR_BOOST_INTERNAL:'BoostHubMotor',
	}

	classname = dev_classes.get(type_id, 'LPF_Device')

	# Ha ha ha, ANYTHING IS A DEVICE!
	class_module = importlib.import_module(f'{__name__}.{classname}')
	return getattr(class_module, classname)
