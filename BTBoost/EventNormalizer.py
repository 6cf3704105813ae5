from collections.abc import Mapping, Sequence
from enum import Enum

class EventKind(Enum):
	"""
	Every event name a color sensor is known to emit, depending on the device
	and its firmware.  They all carry the same reading in different envelopes.

	RAW is what anything else turns into, so it still gets forwarded
	"""
	COLOR = 'color'
	COLOR_AND_DISTANCE = 'colorAndDistance'
	COLOR_DISTANCE = 'colorDistance'
	PORT_VALUE = 'portValue'
	VALUE = 'value'
	DATA = 'data'
	RAW = 'raw'

	@classmethod
	def from_name(cls, event_name):
		try:
			return cls(event_name)
		except ValueError:
			return cls.RAW

	@classmethod
	def sensor_kinds(cls):
		return tuple(kind for kind in cls if kind is not cls.RAW)

def _is_number(value):
	# bool is an int subclass, but True is not a color
	return isinstance(value, (int, float)) and not isinstance(value, bool)

def _is_sequence(value):
	return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))

def _field(payload, name):
	if isinstance(payload, Mapping):
		return payload.get(name)
	return getattr(payload, name, None)

def normalize_event(payload):
	"""
	Pull a single numeric reading out of whatever the device sent

	In order:
		a number
		something with a numeric 'color'
		a sequence starting with a number
		a 'value' that is a sequence starting with a number
		a numeric 'value'

	Returns None for anything else, which is NOT an error.  The caller
	should pass the payload along as raw telemetry.
	"""
	if payload is None:
		return None

	if _is_number(payload):
		return payload

	if _is_sequence(payload):
		if payload and _is_number(payload[0]):
			return payload[0]
		return None

	color = _field(payload, 'color')
	if _is_number(color):
		return color

	value = _field(payload, 'value')
	if _is_sequence(value) and value and _is_number(value[0]):
		return value[0]
	if _is_number(value):
		return value

	return None
