import os
import json
import logging
from pathlib import Path

default_config_file = '~/.btboost.json'

class BoostConfig():

	# Seconds to scan before giving up on finding a hub
	discovery_timeout = 20
	# Seconds to wait for a device to show up on a port
	device_wait_timeout = 5

	# Move Hub built-in motors, and where the BOOST head motor usually goes
	left_port = 'A'
	right_port = 'B'
	head_port = 'D'

	default_sensor_mode = 'color'

	# Decoder.advertised_system_type names to connect to
	hub_types = ( 'boostmove', )

	gatt_send_rate_limit = 0.1

	# After connecting, the hub reports attached devices in a burst.  Wait for
	# enumeration_quiet_time without a new one, but no longer than enumeration_timeout
	enumeration_quiet_time = 0.5
	enumeration_timeout = 3

	settings = (
		'discovery_timeout',
		'device_wait_timeout',
		'left_port',
		'right_port',
		'head_port',
		'default_sensor_mode',
		'hub_types',
		'gatt_send_rate_limit',
		'enumeration_quiet_time',
		'enumeration_timeout',
	)

	def __init__(self, **kwargs):
		for name, value in kwargs.items():
			if name not in self.settings:
				raise TypeError(f'Unknown BoostConfig setting: {name}')
			setattr(self, name, value)
		self.hub_types = tuple(self.hub_types)

	@classmethod
	def from_dict(cls, values):
		logger = logging.getLogger(__name__.split('.')[0])

		known = {}
		for name, value in values.items():
			if name in cls.settings:
				known[name] = value
			else:
				logger.warning(f'Ignoring unknown config setting {name}')
		return cls(**known)

	def as_dict(self):
		return { name: getattr(self, name) for name in self.settings }

def load_config(path=None):
	"""
	Read settings out of a JSON file (~/.btboost.json unless told otherwise)

	No file, or a broken one, just means the defaults
	"""
	logger = logging.getLogger(__name__.split('.')[0])

	if path is None:
		path = default_config_file

	check_file = Path(os.path.expanduser(path))
	if not check_file.is_file():
		logger.debug(f'No config file at {check_file}, using defaults')
		return BoostConfig()

	with open(check_file, "rb") as f:
		try:
			values = json.loads(f.read())
		except ValueError as e:  # also JSONDecodeError
			logger.error(f'Unable to load config JSON {check_file}: {e}')
			return BoostConfig()

	if not isinstance(values, dict):
		logger.error(f'Config file {check_file} does not contain a JSON object')
		return BoostConfig()

	return BoostConfig.from_dict(values)
